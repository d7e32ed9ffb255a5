"""Demo: type descriptor disassembly/assembly and emission of a HelloWorld class."""

import argparse
import logging
import sys

from jpoet import JavaFile, MethodSpec, Modifier, TypeName, TypeSpec
from jpoet.verify import check_java_source

PACKAGE_EXAMPLE = "androidx.lifecycle.LiveData<java.util.List<java.lang.String>>"


class Activity:
    __java_name__ = "com.zeoflow.app.Activity"


class System:
    __java_name__ = "java.lang.System"


def show_descriptors():
    print("=" * 60)
    print("TYPE DESCRIPTORS")
    print("=" * 60)
    print(TypeName.get(str).contains(str))
    print(TypeName.get(PACKAGE_EXAMPLE).contains(str))
    print(TypeName.get("androidx.lifecycle.Observer").contains(str))
    print(TypeName.get(PACKAGE_EXAMPLE).disassemble().disassemble().disassemble().disassemble())
    print(TypeName.get(PACKAGE_EXAMPLE).assemble("java.lang.String").assemble(str))
    print(TypeName.get(str).assemble(Activity, True))
    print(TypeName.get(str).assemble(Activity, False))


def build_hello_world() -> JavaFile:
    main = (
        MethodSpec.method_builder("main")
        .add_modifiers(Modifier.PUBLIC, Modifier.STATIC)
        .returns(None)
        .add_parameter("java.lang.String[]", "args")
        .add_statement("$T.out.println($S)", System, "Hello, JavaPoet!")
        .add_statement("String<T> name")
        .build()
    )
    get_obs = (
        MethodSpec.method_builder("getObs")
        .add_modifiers(Modifier.PUBLIC)
        .returns(None)
        .add_parameter(TypeName.get("com.Observable<T>"), "args")
        .add_statement("$T.out.println($S)", System, "Hello, JavaPoet!")
        .add_statement("String<T> name")
        .build()
    )
    hello_world = (
        TypeSpec.class_builder("HelloWorld<Text, View>")
        .add_modifiers(Modifier.PUBLIC, Modifier.FINAL)
        .add_method(main)
        .add_method(get_obs)
        .build()
    )
    return JavaFile.builder("com.example.helloworld", hello_world).build()


def main():
    parser = argparse.ArgumentParser(description="jpoet HelloWorld demo")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--check", action="store_true", help="Parse the output with tree-sitter")
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    show_descriptors()

    print("=" * 60)
    print("EMITTED SOURCE")
    print("=" * 60)
    java_file = build_hello_world()
    java_file.write_to(sys.stdout)

    if args.check:
        for problem in check_java_source(str(java_file)):
            print(f"  {problem}")


if __name__ == "__main__":
    main()
