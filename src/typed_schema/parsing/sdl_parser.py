"""Parser for the schema definition language.

Produces ``TypeSpec`` objects; registering them is left to
``typed_schema.specs.build_registry`` so that parsed types can be mixed with
class-declared ones.
"""

from __future__ import annotations

from typing import Any

import ply.yacc as yacc

from typed_schema.parsing.sdl_lexer import SDLLexer
from typed_schema.specs import ArgumentSpec, EnumValueSpec, FieldSpec, TypeSpec
from typed_schema.types import UNSET, DecoratorSpec, TypeKind, TypeRef

DEFAULT_DEPRECATION_REASON = "No longer supported"

Directive = tuple[str, dict[str, Any]]


def _deprecation(directives: list[Directive]) -> str | None:
    for name, args in directives:
        if name == "deprecated":
            return args.get("reason", DEFAULT_DEPRECATION_REASON)
    return None


class SDLParser:
    """Parser for schema definition documents.

    Grammar actions must not raise ``SyntaxError``: ply treats it as a request
    for error recovery and drops the enclosing definition. Invalid directives
    are recorded in ``problems`` instead and reported once parsing finishes.
    """

    tokens = SDLLexer.tokens
    start = "document"

    def __init__(self) -> None:
        self.lexer = SDLLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self.problems: list[str] = []

    def _field_spec(
        self,
        description: str | None,
        name: str,
        arguments: list[ArgumentSpec],
        type_ref: TypeRef,
        directives: list[Directive],
    ) -> FieldSpec:
        """Split field directives into method binding, deprecation and decorators."""
        spec = FieldSpec(name=name, type_ref=type_ref, description=description, arguments=arguments)
        for directive, args in directives:
            if directive == "deprecated":
                spec.deprecation_reason = args.get("reason", DEFAULT_DEPRECATION_REASON)
            elif directive == "method":
                if "name" not in args:
                    self.problems.append(f"@method on field '{name}' needs a name argument")
                    continue
                spec.method = args["name"]
            else:
                spec.decorators.append(DecoratorSpec(name=directive, params=args))
        return spec

    def _apply_type_directives(self, spec: TypeSpec, directives: list[Directive]) -> TypeSpec:
        for directive, args in directives:
            if directive == "capability":
                if "name" not in args:
                    self.problems.append(f"@capability on '{spec.name}' needs a name argument")
                    continue
                spec.capabilities.add(args["name"])
            else:
                spec.metadata[directive] = args or True
        return spec

    # -- document ----------------------------------------------------------

    def p_document(self, p: yacc.YaccProduction) -> None:
        """document : definition_list"""
        p[0] = p[1]

    def p_definition_list_single(self, p: yacc.YaccProduction) -> None:
        """definition_list : definition"""
        p[0] = [p[1]]

    def p_definition_list_multiple(self, p: yacc.YaccProduction) -> None:
        """definition_list : definition_list definition"""
        p[0] = p[1] + [p[2]]

    def p_definition(self, p: yacc.YaccProduction) -> None:
        """definition : object_def
                      | interface_def
                      | enum_def
                      | input_def
                      | union_def
                      | scalar_def"""
        p[0] = p[1]

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""
        p[0] = None

    def p_description_opt(self, p: yacc.YaccProduction) -> None:
        """description_opt : STRING
                           | empty"""
        p[0] = p[1]

    def p_name(self, p: yacc.YaccProduction) -> None:
        """name : IDENTIFIER
                | TYPE
                | INTERFACE
                | ENUM
                | INPUT
                | UNION
                | SCALAR
                | IMPLEMENTS
                | TRUE
                | FALSE
                | NULL"""
        p[0] = p[1]

    # -- type definitions --------------------------------------------------

    def p_object_def(self, p: yacc.YaccProduction) -> None:
        """object_def : description_opt TYPE name implements_opt directives_opt LBRACE field_list RBRACE
                      | description_opt TYPE name implements_opt directives_opt LBRACE RBRACE"""
        fields = p[7] if len(p) == 9 else []
        spec = TypeSpec(
            kind=TypeKind.OBJECT, name=p[3], description=p[1], fields=fields, interfaces=p[4]
        )
        p[0] = self._apply_type_directives(spec, p[5])

    def p_interface_def(self, p: yacc.YaccProduction) -> None:
        """interface_def : description_opt INTERFACE name directives_opt LBRACE field_list RBRACE"""
        spec = TypeSpec(kind=TypeKind.INTERFACE, name=p[3], description=p[1], fields=p[6])
        p[0] = self._apply_type_directives(spec, p[4])

    def p_implements_opt(self, p: yacc.YaccProduction) -> None:
        """implements_opt : IMPLEMENTS interface_list
                          | IMPLEMENTS AMP interface_list
                          | empty"""
        if len(p) == 2:
            p[0] = []
        else:
            p[0] = p[len(p) - 1]

    def p_interface_list_single(self, p: yacc.YaccProduction) -> None:
        """interface_list : IDENTIFIER"""
        p[0] = [p[1]]

    def p_interface_list_multiple(self, p: yacc.YaccProduction) -> None:
        """interface_list : interface_list AMP IDENTIFIER
                          | interface_list IDENTIFIER"""
        p[0] = p[1] + [p[len(p) - 1]]

    def p_enum_def(self, p: yacc.YaccProduction) -> None:
        """enum_def : description_opt ENUM name directives_opt LBRACE enum_value_list RBRACE"""
        spec = TypeSpec(kind=TypeKind.ENUM, name=p[3], description=p[1], values=p[6])
        p[0] = self._apply_type_directives(spec, p[4])

    def p_enum_value_list_single(self, p: yacc.YaccProduction) -> None:
        """enum_value_list : enum_value"""
        p[0] = [p[1]]

    def p_enum_value_list_multiple(self, p: yacc.YaccProduction) -> None:
        """enum_value_list : enum_value_list enum_value"""
        p[0] = p[1] + [p[2]]

    def p_enum_value(self, p: yacc.YaccProduction) -> None:
        """enum_value : description_opt enum_value_name directives_opt"""
        for name, _ in p[3]:
            if name != "deprecated":
                self.problems.append(f"Unsupported directive @{name} on enum value '{p[2]}'")
        p[0] = EnumValueSpec(name=p[2], description=p[1], deprecation_reason=_deprecation(p[3]))

    def p_enum_value_name(self, p: yacc.YaccProduction) -> None:
        """enum_value_name : IDENTIFIER
                           | TYPE
                           | INTERFACE
                           | ENUM
                           | INPUT
                           | UNION
                           | SCALAR
                           | IMPLEMENTS"""
        # true, false and null cannot be enum values
        p[0] = p[1]

    def p_input_def(self, p: yacc.YaccProduction) -> None:
        """input_def : description_opt INPUT name directives_opt LBRACE argument_list RBRACE"""
        spec = TypeSpec(kind=TypeKind.INPUT, name=p[3], description=p[1], arguments=p[6])
        p[0] = self._apply_type_directives(spec, p[4])

    def p_union_def(self, p: yacc.YaccProduction) -> None:
        """union_def : description_opt UNION name directives_opt EQUALS union_members"""
        spec = TypeSpec(kind=TypeKind.UNION, name=p[3], description=p[1], possible_types=p[6])
        p[0] = self._apply_type_directives(spec, p[4])

    def p_union_members_single(self, p: yacc.YaccProduction) -> None:
        """union_members : IDENTIFIER
                         | PIPE IDENTIFIER"""
        p[0] = [p[len(p) - 1]]

    def p_union_members_multiple(self, p: yacc.YaccProduction) -> None:
        """union_members : union_members PIPE IDENTIFIER"""
        p[0] = p[1] + [p[3]]

    def p_scalar_def(self, p: yacc.YaccProduction) -> None:
        """scalar_def : description_opt SCALAR name directives_opt"""
        spec = TypeSpec(kind=TypeKind.SCALAR, name=p[3], description=p[1])
        p[0] = self._apply_type_directives(spec, p[4])

    # -- fields and arguments ----------------------------------------------

    def p_field_list_single(self, p: yacc.YaccProduction) -> None:
        """field_list : field"""
        p[0] = [p[1]]

    def p_field_list_multiple(self, p: yacc.YaccProduction) -> None:
        """field_list : field_list field"""
        p[0] = p[1] + [p[2]]

    def p_field(self, p: yacc.YaccProduction) -> None:
        """field : description_opt name arguments_opt COLON type_ref directives_opt"""
        p[0] = self._field_spec(p[1], p[2], p[3], p[5], p[6])

    def p_arguments_opt(self, p: yacc.YaccProduction) -> None:
        """arguments_opt : LPAREN argument_list RPAREN
                         | empty"""
        p[0] = p[2] if len(p) == 4 else []

    def p_argument_list_single(self, p: yacc.YaccProduction) -> None:
        """argument_list : argument"""
        p[0] = [p[1]]

    def p_argument_list_multiple(self, p: yacc.YaccProduction) -> None:
        """argument_list : argument_list argument"""
        p[0] = p[1] + [p[2]]

    def p_argument(self, p: yacc.YaccProduction) -> None:
        """argument : description_opt name COLON type_ref default_opt"""
        p[0] = ArgumentSpec(name=p[2], type_ref=p[4], description=p[1], default_value=p[5])

    def p_default_opt(self, p: yacc.YaccProduction) -> None:
        """default_opt : EQUALS value
                       | empty"""
        p[0] = p[2] if len(p) == 3 else UNSET

    # -- type references ---------------------------------------------------

    def p_type_ref_named(self, p: yacc.YaccProduction) -> None:
        """type_ref : IDENTIFIER
                    | IDENTIFIER BANG"""
        p[0] = TypeRef(name=p[1], non_null=len(p) == 3)

    def p_type_ref_list(self, p: yacc.YaccProduction) -> None:
        """type_ref : LBRACKET type_ref RBRACKET
                    | LBRACKET type_ref RBRACKET BANG"""
        p[0] = TypeRef.list_of(p[2], non_null=len(p) == 5)

    # -- directives and values ---------------------------------------------

    def p_directives_opt(self, p: yacc.YaccProduction) -> None:
        """directives_opt : directive_list
                          | empty"""
        p[0] = p[1] or []

    def p_directive_list_single(self, p: yacc.YaccProduction) -> None:
        """directive_list : directive"""
        p[0] = [p[1]]

    def p_directive_list_multiple(self, p: yacc.YaccProduction) -> None:
        """directive_list : directive_list directive"""
        p[0] = p[1] + [p[2]]

    def p_directive(self, p: yacc.YaccProduction) -> None:
        """directive : AT name
                     | AT name LPAREN directive_arg_list RPAREN"""
        p[0] = (p[2], dict(p[4]) if len(p) == 6 else {})

    def p_directive_arg_list_single(self, p: yacc.YaccProduction) -> None:
        """directive_arg_list : directive_arg"""
        p[0] = [p[1]]

    def p_directive_arg_list_multiple(self, p: yacc.YaccProduction) -> None:
        """directive_arg_list : directive_arg_list directive_arg"""
        p[0] = p[1] + [p[2]]

    def p_directive_arg(self, p: yacc.YaccProduction) -> None:
        """directive_arg : name COLON value"""
        p[0] = (p[1], p[3])

    def p_value_scalar(self, p: yacc.YaccProduction) -> None:
        """value : STRING
                 | INTEGER
                 | FLOAT
                 | IDENTIFIER"""
        p[0] = p[1]

    def p_value_keyword(self, p: yacc.YaccProduction) -> None:
        """value : TRUE
                 | FALSE
                 | NULL"""
        p[0] = {"true": True, "false": False, "null": None}[p[1]]

    def p_value_list(self, p: yacc.YaccProduction) -> None:
        """value : LBRACKET value_list RBRACKET
                 | LBRACKET RBRACKET"""
        p[0] = p[2] if len(p) == 4 else []

    def p_value_list_items(self, p: yacc.YaccProduction) -> None:
        """value_list : value
                      | value_list value"""
        p[0] = [p[1]] if len(p) == 2 else p[1] + [p[2]]

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> list[TypeSpec]:
        """Parse a schema document into type specs."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)
        if not data.strip():
            return []
        self.lexer.lexer.lineno = 1
        self.problems = []
        specs = self.parser.parse(data, lexer=self.lexer.lexer)
        if self.problems:
            raise SyntaxError("; ".join(self.problems))
        return specs or []
