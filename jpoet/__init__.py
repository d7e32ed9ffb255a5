"""jpoet — programmatic Java source generation."""

from .type_name import (  # noqa: F401
    ArrayTypeName,
    ClassName,
    ParameterizedTypeName,
    PrimitiveType,
    TypeName,
    TypeVariableName,
    WildcardTypeName,
)
from .code_block import CodeBlock  # noqa: F401
from .specs import (  # noqa: F401
    AnnotationSpec,
    FieldSpec,
    MethodSpec,
    Modifier,
    ParameterSpec,
    TypeSpec,
)
from .java_file import JavaFile  # noqa: F401
from .api import (  # noqa: F401
    parse_type,
    canonical_type_name,
    generate_source,
    write_source,
)
