"""TypeChecker — symbol and type queries over a bound program.

Answers the questions the component factories ask of a TypeScript
program: which symbol a name refers to, what an alias points at, what
type a member has and how that type prints. Annotations are read
directly; unannotated initializers and function bodies get a shallow
inference (literals, ``new`` expressions, arrays, object literals, arrow
functions, locals, member access and calls). Anything else is ``any``.
"""

import logging
from typing import Dict, List, Optional, Set

import tree_sitter

from .models import (
    CONSTRUCTOR_SYMBOL_NAME,
    Declaration,
    DeclarationKind,
    Signature,
    Symbol,
    SymbolFlags,
)
from .types import (
    ANY_TYPE,
    BIGINT_TYPE,
    BOOLEAN_TYPE,
    NULL_TYPE,
    NUMBER_TYPE,
    STRING_TYPE,
    UNDEFINED_TYPE,
    VOID_TYPE,
    ArrayType,
    FunctionType,
    IntersectionType,
    IntrinsicType,
    LiteralType,
    ObjectType,
    ParameterInfo,
    TextType,
    TupleType,
    Type,
    TypeReference,
    UnionType,
)
from .utils import (
    child_by_type,
    children_by_type,
    collapse_whitespace,
    field_or_type,
    has_token,
    iter_descendants,
    modifier_tokens,
    node_key,
    node_text,
    string_literal_value,
)

logger = logging.getLogger(__name__)

# Global types every program can reference without declaring them
BUILTIN_TYPE_NAMES = (
    "Array",
    "ReadonlyArray",
    "Set",
    "ReadonlySet",
    "Map",
    "ReadonlyMap",
    "WeakMap",
    "WeakSet",
    "Promise",
    "Date",
    "RegExp",
    "Error",
    "Function",
    "Object",
    "String",
    "Number",
    "Boolean",
    "Symbol",
    "Record",
    "Partial",
    "Required",
    "Readonly",
    "Pick",
    "Omit",
    "Iterable",
    "Iterator",
    "Generator",
)

_TYPE_ANNOTATION_NODES = ("type_annotation", "opting_type_annotation", "omitting_type_annotation")

# Alias targets that tsc prints under the alias name
_NAMED_ALIAS_TARGETS = (
    "union_type",
    "intersection_type",
    "object_type",
    "function_type",
    "constructor_type",
    "tuple_type",
    "conditional_type",
    "mapped_type_clause",
    "template_literal_type",
    "index_type_query",
    "lookup_type",
    "type_query",
)

_FUNCTION_EXPRESSIONS = ("arrow_function", "function_expression", "function", "generator_function")

# Node types whose return statements belong to another function
_FUNCTION_BOUNDARIES = _FUNCTION_EXPRESSIONS + (
    "function_declaration",
    "generator_function_declaration",
    "method_definition",
    "class_declaration",
    "class",
    "abstract_class_declaration",
)

_RELATIONAL_OPERATORS = frozenset(
    {"==", "!=", "===", "!==", "<", ">", "<=", ">=", "instanceof", "in"}
)
_NUMERIC_OPERATORS = frozenset({"-", "*", "/", "%", "**", "&", "|", "^", "<<", ">>", ">>>"})

# Well-known globals typed without a lib.d.ts
_GLOBAL_VALUE_TYPES = {"Infinity": NUMBER_TYPE, "NaN": NUMBER_TYPE}
_GLOBAL_CALL_TYPES = {
    "String": STRING_TYPE,
    "Number": NUMBER_TYPE,
    "Boolean": BOOLEAN_TYPE,
    "parseInt": NUMBER_TYPE,
    "parseFloat": NUMBER_TYPE,
    "isNaN": BOOLEAN_TYPE,
}

_FUNCTION_LIKE_KINDS = (
    DeclarationKind.FUNCTION,
    DeclarationKind.METHOD,
    DeclarationKind.METHOD_SIGNATURE,
    DeclarationKind.CONSTRUCTOR,
    DeclarationKind.CALL_SIGNATURE,
    DeclarationKind.CONSTRUCT_SIGNATURE,
)


class TypeChecker:
    """Symbol resolution and type display for one ``Program``."""

    def __init__(self, program):
        self.program = program
        self.binder = program.binder
        self._builtins: Dict[str, Symbol] = {
            name: Symbol(name=name, flags=SymbolFlags.INTERFACE | SymbolFlags.VARIABLE)
            for name in BUILTIN_TYPE_NAMES
        }
        self._unknown_symbol = Symbol(name="unknown", flags=SymbolFlags.NONE)
        self._in_progress: Set[tuple] = set()

    # =========================================================================
    # Symbols
    # =========================================================================

    def get_symbol_at_location(self, node: tree_sitter.Node) -> Optional[Symbol]:
        """Return the symbol a name node declares or refers to.

        Imported names return their alias symbol; use
        ``get_aliased_symbol`` to reach the declaration.
        """
        declared = self.binder.get_symbol_of_name(node)
        if declared is not None:
            return declared

        node_type = node.type
        if node_type in ("identifier", "type_identifier", "property_identifier", "shorthand_property_identifier"):
            return self.resolve_name(node_text(node), node)
        if node_type in ("member_expression", "nested_identifier", "nested_type_identifier"):
            return self._resolve_qualified(node)
        if node_type == "generic_type":
            name = field_or_type(node, "name", "type_identifier", "nested_type_identifier")
            return self.get_symbol_at_location(name) if name is not None else None
        if node_type == "expression_with_type_arguments":
            return self.get_symbol_at_location(node.named_children[0])
        return None

    def _resolve_qualified(self, node: tree_sitter.Node) -> Optional[Symbol]:
        named = node.named_children
        if len(named) < 2:
            return None
        left, right = named[0], named[-1]
        left_symbol = self.get_symbol_at_location(left)
        if left_symbol is None:
            return None
        container = self.get_aliased_symbol(left_symbol)
        return self._get_export(container, node_text(right))

    def resolve_name(self, name: str, location: tree_sitter.Node) -> Optional[Symbol]:
        """Resolve ``name`` through the lexical scopes enclosing ``location``."""
        declaration = self.binder.get_enclosing_declaration(location)
        while declaration is not None:
            if declaration.kind in (DeclarationKind.CLASS, DeclarationKind.INTERFACE) and declaration.symbol:
                member = declaration.symbol.members.get(name)
                if member is not None and member.has_flag(SymbolFlags.TYPE_PARAMETER):
                    return member
            elif name in declaration.locals:
                return declaration.locals[name]
            if declaration.kind == DeclarationKind.MODULE and declaration.symbol is not None:
                exported = declaration.symbol.exports.get(name)
                if exported is not None:
                    return exported
            declaration = declaration.container

        if name in self.binder.globals:
            return self.binder.globals[name]
        return self._builtins.get(name)

    def get_aliased_symbol(self, symbol: Symbol) -> Symbol:
        """Follow an alias chain to the symbol it finally names.

        Non-alias symbols are returned unchanged; unresolvable or circular
        chains return an ``unknown`` symbol with no declarations.
        """
        seen: Set[int] = set()
        current = symbol
        while current.has_flag(SymbolFlags.ALIAS):
            if id(current) in seen:
                logger.debug(f"Circular alias chain at {symbol.name}")
                return self._unknown_symbol
            seen.add(id(current))
            target = self._resolve_alias_once(current)
            if target is None:
                logger.debug(f"Could not resolve alias {current.name}")
                return self._unknown_symbol
            current = target
        return current

    def _resolve_alias_once(self, alias: Symbol) -> Optional[Symbol]:
        meta = alias.meta
        scope: Optional[Declaration] = meta.get("scope")
        if "module" in meta:
            containing_file = alias.declarations[0].file_name if alias.declarations else ""
            resolved = self.program.resolve_module(meta["module"], containing_file)
            if resolved is None:
                return None
            source_file = self.program.get_source_file(resolved)
            if source_file is None or source_file.symbol is None:
                return None
            if meta["import_name"] == "*":
                return source_file.symbol
            return self._get_export(source_file.symbol, meta["import_name"])
        if "local" in meta:
            if scope is not None and meta["local"] in scope.locals:
                return scope.locals[meta["local"]]
            if scope is not None:
                return self.resolve_name(meta["local"], scope.node)
            return None
        if "entity" in meta:
            return self.get_symbol_at_location(meta["entity"])
        return None

    def _get_export(self, container: Symbol, name: str, seen: Optional[Set[int]] = None) -> Optional[Symbol]:
        if name in container.exports:
            return container.exports[name]
        if not container.has_flag(SymbolFlags.SOURCE_FILE):
            return None
        if not container.meta.get("is_module"):
            declaration = container.value_declaration
            return declaration.locals.get(name) if declaration else None

        seen = seen or set()
        if id(container) in seen:
            return None
        seen.add(id(container))
        file_name = container.value_declaration.file_name
        for specifier in container.meta.get("export_stars", []):
            resolved = self.program.resolve_module(specifier, file_name)
            source_file = self.program.get_source_file(resolved) if resolved else None
            if source_file is None or source_file.symbol is None:
                continue
            found = self._get_export(source_file.symbol, name, seen)
            if found is not None:
                return found
        return None

    def get_fully_qualified_name(self, symbol: Symbol) -> str:
        """Dotted name through enclosing namespaces and classes."""
        parts = [symbol.name]
        parent = symbol.parent
        while parent is not None and not parent.has_flag(SymbolFlags.SOURCE_FILE):
            parts.append(parent.name)
            parent = parent.parent
        return ".".join(reversed(parts))

    def get_exports_of_module(self, symbol: Symbol) -> List[Symbol]:
        return list(self.get_aliased_symbol(symbol).exports.values())

    # =========================================================================
    # Types of symbols
    # =========================================================================

    def get_type_of_symbol_at_location(self, symbol: Symbol, location: Optional[tree_sitter.Node] = None) -> Type:
        symbol = self.get_aliased_symbol(symbol)
        declaration = symbol.value_declaration
        if declaration is None:
            return ANY_TYPE

        kind = declaration.kind
        if kind in (DeclarationKind.GET_ACCESSOR, DeclarationKind.SET_ACCESSOR):
            return self._get_type_of_accessor(symbol)
        if kind in (
            DeclarationKind.PROPERTY,
            DeclarationKind.PROPERTY_SIGNATURE,
            DeclarationKind.VARIABLE,
            DeclarationKind.PARAMETER,
        ):
            return self._get_type_of_variable_like(declaration)
        if kind in _FUNCTION_LIKE_KINDS:
            signature = self.get_signature_from_declaration(declaration)
            return self._signature_to_function_type(signature)
        if kind in (DeclarationKind.CLASS, DeclarationKind.ENUM, DeclarationKind.MODULE):
            return TypeReference(f"typeof {self.get_fully_qualified_name(symbol)}", symbol)
        if kind == DeclarationKind.ENUM_MEMBER:
            return TypeReference(self.get_fully_qualified_name(symbol), symbol)
        if kind in (DeclarationKind.INTERFACE, DeclarationKind.TYPE_ALIAS, DeclarationKind.TYPE_PARAMETER):
            return self.get_declared_type_of_symbol(symbol)
        return ANY_TYPE

    def get_declared_type_of_symbol(self, symbol: Symbol) -> Type:
        symbol = self.get_aliased_symbol(symbol)
        declaration = symbol.value_declaration
        if declaration is not None and declaration.kind == DeclarationKind.TYPE_ALIAS:
            return self._get_type_of_alias(symbol, declaration, [])
        name = self.get_fully_qualified_name(symbol)
        if declaration is not None and declaration.kind in (DeclarationKind.CLASS, DeclarationKind.INTERFACE):
            type_parameters = [s for s in symbol.members.values() if s.has_flag(SymbolFlags.TYPE_PARAMETER)]
            arguments = [TypeReference(tp.name, tp) for tp in type_parameters]
            return TypeReference(name, symbol, arguments)
        return TypeReference(name, symbol)

    def _get_type_of_variable_like(self, declaration: Declaration) -> Type:
        node = declaration.node
        annotation = node.child_by_field_name("type")
        if annotation is not None:
            return self.get_type_from_type_node(annotation)

        pattern = node.child_by_field_name("pattern")
        if pattern is not None and pattern.type == "rest_pattern":
            return ArrayType(ANY_TYPE, self._builtins["Array"])

        value = node.child_by_field_name("value")
        if value is None:
            return ANY_TYPE
        keep_literal = self._keeps_literal_type(declaration)
        return self._infer_guarded(value, keep_literal)

    def _keeps_literal_type(self, declaration: Declaration) -> bool:
        """``const`` variables and readonly properties keep literal types."""
        if declaration.kind == DeclarationKind.VARIABLE:
            parent = declaration.node.parent
            return parent is not None and has_token(parent, "const")
        if declaration.kind == DeclarationKind.PROPERTY:
            return "readonly" in modifier_tokens(declaration.node)
        return False

    def _get_type_of_accessor(self, symbol: Symbol) -> Type:
        getter = next((d for d in symbol.declarations if d.kind == DeclarationKind.GET_ACCESSOR), None)
        if getter is not None:
            return self.get_signature_from_declaration(getter).return_type
        setter = next((d for d in symbol.declarations if d.kind == DeclarationKind.SET_ACCESSOR), None)
        if setter is not None and setter.parameters:
            return self.get_type_of_symbol_at_location(setter.parameters[0])
        return ANY_TYPE

    # =========================================================================
    # Signatures
    # =========================================================================

    def get_signature_from_declaration(self, declaration: Declaration) -> Signature:
        return Signature(
            declaration=declaration,
            parameters=list(declaration.parameters),
            type_parameters=list(declaration.type_parameters),
            return_type=self._get_return_type(declaration),
        )

    def _get_return_type(self, declaration: Declaration) -> Type:
        node = declaration.node
        if declaration.kind == DeclarationKind.CONSTRUCTOR:
            class_symbol = declaration.container.symbol if declaration.container else None
            if class_symbol is None:
                return ANY_TYPE
            return self.get_declared_type_of_symbol(class_symbol)
        if declaration.kind == DeclarationKind.SET_ACCESSOR:
            return VOID_TYPE

        annotation = field_or_type(node, "return_type", *_TYPE_ANNOTATION_NODES)
        if annotation is not None:
            return self.get_type_from_type_node(annotation)

        body = node.child_by_field_name("body")
        if body is None:
            return ANY_TYPE
        key = ("return",) + node_key(node)
        if key in self._in_progress:
            return ANY_TYPE
        self._in_progress.add(key)
        try:
            return self._infer_function_body(node, body)
        finally:
            self._in_progress.discard(key)

    def _signature_to_function_type(self, signature: Signature) -> FunctionType:
        parameters = [self._parameter_info(symbol) for symbol in signature.parameters]
        return FunctionType(
            parameters=parameters,
            return_type=signature.return_type,
            type_parameters=[tp.name for tp in signature.type_parameters],
            is_constructor=signature.declaration.kind == DeclarationKind.CONSTRUCT_SIGNATURE,
        )

    def _parameter_info(self, symbol: Symbol) -> ParameterInfo:
        declaration = symbol.value_declaration
        node = declaration.node
        pattern = node.child_by_field_name("pattern")
        return ParameterInfo(
            name=symbol.name,
            type=self.get_type_of_symbol_at_location(symbol),
            optional=node.type == "optional_parameter" or node.child_by_field_name("value") is not None,
            rest=pattern is not None and pattern.type == "rest_pattern",
        )

    # =========================================================================
    # Type nodes
    # =========================================================================

    def get_type_from_type_node(self, node: tree_sitter.Node) -> Type:
        node_type = node.type
        if node_type in _TYPE_ANNOTATION_NODES or node_type in ("parenthesized_type", "type_predicate_annotation"):
            inner = node.named_children
            if not inner:
                return ANY_TYPE
            return self.get_type_from_type_node(inner[0])

        if node_type == "predefined_type":
            return IntrinsicType(node_text(node))
        if node_type in ("type_identifier", "nested_type_identifier", "identifier"):
            return self._get_type_from_reference(node, node, [])
        if node_type == "generic_type":
            name_node = field_or_type(node, "name", "type_identifier", "nested_type_identifier")
            arguments_node = field_or_type(node, "type_arguments", "type_arguments")
            arguments = [self.get_type_from_type_node(a) for a in arguments_node.named_children] if arguments_node else []
            return self._get_type_from_reference(node, name_node, arguments)
        if node_type == "array_type":
            return ArrayType(self.get_type_from_type_node(node.named_children[0]), self._builtins["Array"])
        if node_type == "readonly_type":
            inner = self.get_type_from_type_node(node.named_children[0])
            if isinstance(inner, (ArrayType, TupleType)):
                inner.readonly = True
                if isinstance(inner, ArrayType):
                    inner.array_symbol = self._builtins["ReadonlyArray"]
                return inner
            return TextType(collapse_whitespace(node_text(node)))
        if node_type in ("union_type", "intersection_type"):
            members: List[Type] = []
            self._flatten_type_operands(node, node_type, members)
            cls = UnionType if node_type == "union_type" else IntersectionType
            return cls(_dedupe_types(members))
        if node_type in ("function_type", "constructor_type"):
            return self._get_function_type_from_node(node, is_constructor=node_type == "constructor_type")
        if node_type == "object_type":
            return ObjectType([self._object_type_member_to_string(m) for m in node.named_children if m.type != "comment"])
        if node_type == "tuple_type":
            return TupleType([self.get_type_from_type_node(e) for e in node.named_children])
        if node_type == "literal_type":
            inner = node.named_children[0] if node.named_children else None
            if inner is not None and inner.type == "null":
                return NULL_TYPE
            if inner is not None and inner.type == "undefined":
                return UNDEFINED_TYPE
            if inner is not None and inner.type == "string":
                return LiteralType(f'"{string_literal_value(inner) or ""}"')
            return LiteralType(node_text(node))
        if node_type == "this_type":
            return TextType("this")
        if node_type == "undefined":
            return UNDEFINED_TYPE
        return TextType(collapse_whitespace(node_text(node)))

    def _flatten_type_operands(self, node: tree_sitter.Node, operator_type: str, out: List[Type]) -> None:
        for child in node.named_children:
            if child.type == operator_type:
                self._flatten_type_operands(child, operator_type, out)
            else:
                out.append(self.get_type_from_type_node(child))

    def _get_type_from_reference(
        self,
        node: tree_sitter.Node,
        name_node: tree_sitter.Node,
        arguments: List[Type],
    ) -> Type:
        name = collapse_whitespace(node_text(name_node))
        symbol = self.get_symbol_at_location(name_node)
        target = self.get_aliased_symbol(symbol) if symbol is not None else None

        if target is self._builtins.get("Array") and len(arguments) == 1:
            return ArrayType(arguments[0], target)
        if target is self._builtins.get("ReadonlyArray") and len(arguments) == 1:
            return ArrayType(arguments[0], target, readonly=True)

        declaration = target.value_declaration if target is not None else None
        if declaration is not None and declaration.kind == DeclarationKind.TYPE_ALIAS:
            return self._get_type_of_alias(target, declaration, arguments, display_name=name, symbol=symbol)
        return TypeReference(name, symbol, arguments)

    def _get_type_of_alias(
        self,
        alias_symbol: Symbol,
        declaration: Declaration,
        arguments: List[Type],
        display_name: Optional[str] = None,
        symbol: Optional[Symbol] = None,
    ) -> Type:
        name = display_name or alias_symbol.name
        value = declaration.node.child_by_field_name("value")
        if value is None or value.type in _NAMED_ALIAS_TARGETS or arguments or declaration.type_parameters:
            return TypeReference(name, symbol or alias_symbol, arguments)
        key = ("alias",) + node_key(declaration.node)
        if key in self._in_progress:
            return TypeReference(name, symbol or alias_symbol, arguments)
        self._in_progress.add(key)
        try:
            return self.get_type_from_type_node(value)
        finally:
            self._in_progress.discard(key)

    def _get_function_type_from_node(self, node: tree_sitter.Node, is_constructor: bool = False) -> FunctionType:
        parameters_node = field_or_type(node, "parameters", "formal_parameters")
        parameters = self._parameter_infos_from_node(parameters_node) if parameters_node else []
        return_node = field_or_type(node, "return_type")
        if return_node is None:
            # (a) => T puts the return type after the arrow as a bare type node
            named = [c for c in node.named_children if c.type not in ("formal_parameters", "type_parameters")]
            return_node = named[-1] if named else None
        return_type = self.get_type_from_type_node(return_node) if return_node is not None else ANY_TYPE
        type_parameters_node = field_or_type(node, "type_parameters", "type_parameters")
        type_parameters = [
            collapse_whitespace(node_text(tp)) for tp in children_by_type(type_parameters_node, "type_parameter")
        ] if type_parameters_node is not None else []
        return FunctionType(parameters, return_type, type_parameters, is_constructor)

    def _parameter_infos_from_node(self, parameters_node: tree_sitter.Node) -> List[ParameterInfo]:
        infos: List[ParameterInfo] = []
        for parameter in parameters_node.named_children:
            if parameter.type not in ("required_parameter", "optional_parameter"):
                continue
            pattern = parameter.child_by_field_name("pattern")
            if pattern is None or pattern.type == "this":
                continue
            rest = pattern.type == "rest_pattern"
            name_node = pattern.named_children[0] if rest and pattern.named_children else pattern
            annotation = parameter.child_by_field_name("type")
            value = parameter.child_by_field_name("value")
            if annotation is not None:
                parameter_type = self.get_type_from_type_node(annotation)
            elif value is not None:
                parameter_type = self._infer_guarded(value)
            elif rest:
                parameter_type = ArrayType(ANY_TYPE, self._builtins["Array"])
            else:
                parameter_type = ANY_TYPE
            infos.append(ParameterInfo(
                name=collapse_whitespace(node_text(name_node)),
                type=parameter_type,
                optional=parameter.type == "optional_parameter" or value is not None,
                rest=rest,
            ))
        return infos

    def _object_type_member_to_string(self, member: tree_sitter.Node) -> str:
        if member.type == "property_signature":
            name = node_text(member.child_by_field_name("name"))
            annotation = member.child_by_field_name("type")
            member_type = self.get_type_from_type_node(annotation) if annotation is not None else ANY_TYPE
            prefix = "readonly " if "readonly" in modifier_tokens(member) else ""
            marker = "?" if has_token(member, "?") else ""
            return f"{prefix}{name}{marker}: {member_type.display()}"
        if member.type in ("method_signature", "call_signature", "construct_signature"):
            name = node_text(member.child_by_field_name("name"))
            function_type = self._get_function_type_from_node(member)
            params = ", ".join(p.display() for p in function_type.parameters)
            keyword = "new " if member.type == "construct_signature" else ""
            marker = "?" if has_token(member, "?") else ""
            return f"{keyword}{name}{marker}({params}): {function_type.return_type.display()}"
        return collapse_whitespace(node_text(member)).rstrip(";,")

    # =========================================================================
    # Inference
    # =========================================================================

    def get_type_at_location(self, node: tree_sitter.Node) -> Type:
        """Type of an expression node."""
        return self._infer_guarded(node)

    def _infer_guarded(self, node: tree_sitter.Node, keep_literal: bool = False) -> Type:
        key = ("expr",) + node_key(node)
        if key in self._in_progress:
            return ANY_TYPE
        self._in_progress.add(key)
        try:
            return self._infer_expression(node, keep_literal)
        finally:
            self._in_progress.discard(key)

    def _infer_expression(self, node: tree_sitter.Node, keep_literal: bool = False) -> Type:
        node_type = node.type

        if node_type == "number":
            return LiteralType(node_text(node)) if keep_literal else NUMBER_TYPE
        if node_type == "string":
            if keep_literal:
                return LiteralType(f'"{string_literal_value(node) or ""}"')
            return STRING_TYPE
        if node_type == "template_string":
            return STRING_TYPE
        if node_type in ("true", "false"):
            return LiteralType(node_type) if keep_literal else BOOLEAN_TYPE
        if node_type in ("null", "undefined"):
            return ANY_TYPE
        if node_type == "regex":
            return TypeReference("RegExp", self._builtins["RegExp"])
        if node_type == "this":
            return TextType("this")

        if node_type == "new_expression":
            return self._infer_new_expression(node)
        if node_type == "array":
            return self._infer_array(node)
        if node_type == "object":
            return self._infer_object(node)
        if node_type in _FUNCTION_EXPRESSIONS:
            return self._infer_function_expression(node)

        if node_type == "as_expression":
            target = node.named_children[-1] if len(node.named_children) > 1 else None
            if target is not None and node_text(target) != "const":
                return self.get_type_from_type_node(target)
            return self._infer_guarded(node.named_children[0], keep_literal=True)
        if node_type == "type_assertion":
            type_arguments = child_by_type(node, "type_arguments")
            if type_arguments is not None and type_arguments.named_children:
                return self.get_type_from_type_node(type_arguments.named_children[0])
            return ANY_TYPE
        if node_type in ("satisfies_expression", "non_null_expression", "parenthesized_expression"):
            inner = node.named_children
            return self._infer_guarded(inner[0], keep_literal) if inner else ANY_TYPE

        if node_type == "unary_expression":
            operator = node.child_by_field_name("operator")
            operator_text = operator.type if operator is not None else ""
            if operator_text == "!":
                return BOOLEAN_TYPE
            if operator_text == "typeof":
                return STRING_TYPE
            if operator_text in ("-", "+", "~"):
                argument = node.child_by_field_name("argument")
                if keep_literal and operator_text == "-" and argument is not None and argument.type == "number":
                    return LiteralType(node_text(node))
                return NUMBER_TYPE
            return ANY_TYPE
        if node_type == "update_expression":
            return NUMBER_TYPE
        if node_type == "binary_expression":
            return self._infer_binary(node)
        if node_type == "ternary_expression":
            consequence = node.child_by_field_name("consequence")
            alternative = node.child_by_field_name("alternative")
            branches = [self._infer_guarded(b) for b in (consequence, alternative) if b is not None]
            return _union_of(branches)
        if node_type == "await_expression":
            inner = self._infer_guarded(node.named_children[0]) if node.named_children else ANY_TYPE
            if isinstance(inner, TypeReference) and inner.name == "Promise" and inner.arguments:
                return inner.arguments[0]
            return inner

        if node_type == "identifier":
            return self._infer_identifier(node)
        if node_type == "member_expression":
            return self._infer_member_access(node)
        if node_type == "call_expression":
            return self._infer_call(node)
        if node_type == "assignment_expression":
            right = node.child_by_field_name("right")
            return self._infer_guarded(right) if right is not None else ANY_TYPE

        return ANY_TYPE

    def _infer_new_expression(self, node: tree_sitter.Node) -> Type:
        constructor = node.child_by_field_name("constructor")
        if constructor is None:
            return ANY_TYPE
        arguments_node = node.child_by_field_name("type_arguments")
        arguments = [self.get_type_from_type_node(a) for a in arguments_node.named_children] if arguments_node else []
        symbol = self.get_symbol_at_location(constructor)
        name = collapse_whitespace(node_text(constructor))
        if not arguments and symbol is not None:
            target = self.get_aliased_symbol(symbol)
            type_parameters = [s for s in target.members.values() if s.has_flag(SymbolFlags.TYPE_PARAMETER)]
            if type_parameters:
                arguments = [IntrinsicType("unknown") for _ in type_parameters]
        return TypeReference(name, symbol, arguments)

    def _infer_array(self, node: tree_sitter.Node) -> Type:
        elements = [e for e in node.named_children if e.type not in ("comment", "spread_element")]
        if not elements:
            return ArrayType(ANY_TYPE, self._builtins["Array"])
        element_types = [self._infer_guarded(e) for e in elements]
        return ArrayType(_union_of(element_types), self._builtins["Array"])

    def _infer_object(self, node: tree_sitter.Node) -> Type:
        members: List[str] = []
        for entry in node.named_children:
            if entry.type == "pair":
                key = entry.child_by_field_name("key")
                value = entry.child_by_field_name("value")
                key_text = string_literal_value(key) if key is not None and key.type == "string" else node_text(key)
                value_type = self._infer_guarded(value) if value is not None else ANY_TYPE
                members.append(f"{key_text}: {value_type.display()}")
            elif entry.type == "shorthand_property_identifier":
                members.append(f"{node_text(entry)}: {self._infer_identifier(entry).display()}")
            elif entry.type == "method_definition":
                name = node_text(entry.child_by_field_name("name"))
                function_type = self._infer_function_expression(entry)
                params = ", ".join(p.display() for p in function_type.parameters)
                members.append(f"{name}({params}): {function_type.return_type.display()}")
        return ObjectType(members)

    def _infer_function_expression(self, node: tree_sitter.Node) -> FunctionType:
        parameters_node = field_or_type(node, "parameters", "formal_parameters")
        if parameters_node is not None:
            parameters = self._parameter_infos_from_node(parameters_node)
        else:
            single = node.child_by_field_name("parameter")
            parameters = [ParameterInfo(node_text(single), ANY_TYPE)] if single is not None else []

        annotation = field_or_type(node, "return_type")
        if annotation is not None:
            return_type = self.get_type_from_type_node(annotation)
        else:
            body = node.child_by_field_name("body")
            return_type = self._infer_function_body(node, body) if body is not None else ANY_TYPE
        return FunctionType(parameters, return_type)

    def _infer_function_body(self, function_node: tree_sitter.Node, body: tree_sitter.Node) -> Type:
        is_async = has_token(function_node, "async")
        if has_token(function_node, "*") or function_node.type.startswith("generator_"):
            return TypeReference("Generator", self._builtins["Generator"], [ANY_TYPE, ANY_TYPE, ANY_TYPE])

        if body.type != "statement_block":
            result = self._infer_guarded(body)
        else:
            returned: List[Type] = []
            for descendant in iter_descendants(body, stop_types=_FUNCTION_BOUNDARIES):
                if descendant.type != "return_statement" or not descendant.named_children:
                    continue
                value = descendant.named_children[0]
                if value.type in ("null", "undefined"):
                    continue
                returned.append(self._infer_guarded(value))
            has_value_return = any(
                d.type == "return_statement" and d.named_children
                for d in iter_descendants(body, stop_types=_FUNCTION_BOUNDARIES)
            )
            if not returned:
                result = ANY_TYPE if has_value_return else VOID_TYPE
            else:
                result = _union_of(returned)

        if is_async:
            return TypeReference("Promise", self._builtins["Promise"], [result])
        return result

    def _infer_binary(self, node: tree_sitter.Node) -> Type:
        operator = node.child_by_field_name("operator")
        operator_text = operator.type if operator is not None else ""
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if operator_text in _RELATIONAL_OPERATORS:
            return BOOLEAN_TYPE
        if operator_text in _NUMERIC_OPERATORS:
            return NUMBER_TYPE
        left_type = self._infer_guarded(left) if left is not None else ANY_TYPE
        right_type = self._infer_guarded(right) if right is not None else ANY_TYPE
        if operator_text == "+":
            if STRING_TYPE.display() in (left_type.display(), right_type.display()):
                return STRING_TYPE
            if left_type.display() == right_type.display() == "number":
                return NUMBER_TYPE
            if left_type.display() == right_type.display() == "bigint":
                return BIGINT_TYPE
            return ANY_TYPE
        if operator_text == "&&":
            return right_type
        if operator_text in ("||", "??"):
            return _union_of([left_type, right_type])
        return ANY_TYPE

    def _infer_identifier(self, node: tree_sitter.Node) -> Type:
        name = node_text(node)
        if name == "undefined":
            return ANY_TYPE

        local = self._find_lexical_binding(name, node)
        if local is not None:
            return local

        symbol = self.resolve_name(name, node)
        if symbol is None or symbol is self._builtins.get(name):
            return _GLOBAL_VALUE_TYPES.get(name, ANY_TYPE)
        return self.get_type_of_symbol_at_location(symbol, node)

    def _find_lexical_binding(self, name: str, location: tree_sitter.Node) -> Optional[Type]:
        """Type of a block-scoped variable or function-expression parameter.

        Bound declarations (file, namespace and function scopes) are left to
        ``resolve_name``; this covers bodies the binder does not walk.
        """
        current = location.parent
        while current is not None and current.type != "program":
            if current.type in ("statement_block", "for_statement", "for_in_statement"):
                for child in current.children:
                    if child.start_byte >= location.start_byte:
                        break
                    if child.type not in ("lexical_declaration", "variable_declaration"):
                        continue
                    for declarator in children_by_type(child, "variable_declarator"):
                        declarator_name = declarator.child_by_field_name("name")
                        if declarator_name is None or node_text(declarator_name) != name:
                            continue
                        annotation = declarator.child_by_field_name("type")
                        if annotation is not None:
                            return self.get_type_from_type_node(annotation)
                        value = declarator.child_by_field_name("value")
                        if value is None:
                            return ANY_TYPE
                        return self._infer_guarded(value, keep_literal=has_token(child, "const"))
            elif current.type in _FUNCTION_EXPRESSIONS:
                parameters_node = field_or_type(current, "parameters", "formal_parameters")
                if parameters_node is not None:
                    for info in self._parameter_infos_from_node(parameters_node):
                        if info.name == name:
                            return info.type
                single = current.child_by_field_name("parameter")
                if single is not None and node_text(single) == name:
                    return ANY_TYPE
            if self.binder.get_declaration(current) is not None:
                break
            current = current.parent
        return None

    def _infer_member_access(self, node: tree_sitter.Node) -> Type:
        member = self._resolve_member_access(node)
        if member is None:
            object_node = node.child_by_field_name("object")
            property_node = node.child_by_field_name("property")
            if self._is_math(object_node):
                return NUMBER_TYPE
            if object_node is not None and property_node is not None and node_text(property_node) == "length":
                object_type = self._infer_guarded(object_node)
                if isinstance(object_type, ArrayType) or object_type.display() == "string":
                    return NUMBER_TYPE
            return ANY_TYPE
        if member.has_flag(SymbolFlags.ENUM_MEMBER) and member.parent is not None:
            # Enum members widen to the enum type when used as initializers
            return TypeReference(self.get_fully_qualified_name(member.parent), member.parent)
        return self.get_type_of_symbol_at_location(member, node)

    def _resolve_member_access(self, node: tree_sitter.Node) -> Optional[Symbol]:
        object_node = node.child_by_field_name("object")
        property_node = node.child_by_field_name("property")
        if object_node is None or property_node is None:
            return None
        property_name = node_text(property_node)

        if object_node.type == "this":
            class_declaration = self._enclosing_class(node)
            if class_declaration is None or class_declaration.symbol is None:
                return None
            return self._lookup_member(class_declaration.symbol, property_name)

        if object_node.type in ("identifier", "member_expression"):
            symbol = self.get_symbol_at_location(object_node) if object_node.type == "identifier" else None
            if object_node.type == "member_expression":
                symbol = self._resolve_member_access(object_node)
            if symbol is not None:
                target = self.get_aliased_symbol(symbol)
                if target.has_flag(SymbolFlags.CLASS | SymbolFlags.ENUM | SymbolFlags.NAMESPACE | SymbolFlags.SOURCE_FILE):
                    return self._get_export(target, property_name)

        object_type = self._infer_guarded(object_node)
        type_symbol = object_type.get_symbol()
        if type_symbol is None:
            return None
        return self._lookup_member(self.get_aliased_symbol(type_symbol), property_name)

    def _lookup_member(self, symbol: Symbol, name: str, seen: Optional[Set[int]] = None) -> Optional[Symbol]:
        """Find an instance member, searching base classes and interfaces."""
        if name in symbol.members and not symbol.members[name].has_flag(SymbolFlags.TYPE_PARAMETER):
            return symbol.members[name]
        seen = seen or set()
        if id(symbol) in seen:
            return None
        seen.add(id(symbol))
        for base in self.get_base_symbols(symbol):
            found = self._lookup_member(base, name, seen)
            if found is not None:
                return found
        return None

    def get_base_symbols(self, symbol: Symbol) -> List[Symbol]:
        """Resolved ``extends``/``implements`` targets of a class or interface."""
        bases: List[Symbol] = []
        for declaration in symbol.declarations:
            for reference in self.get_heritage_references(declaration):
                base = self.get_symbol_at_location(reference)
                if base is not None:
                    bases.append(self.get_aliased_symbol(base))
        return bases

    def get_heritage_references(self, declaration: Declaration, clause: Optional[str] = None) -> List[tree_sitter.Node]:
        """Name nodes listed in a declaration's heritage clauses.

        ``clause`` selects ``"extends"`` or ``"implements"``; None returns
        both, extends first.
        """
        node = declaration.node
        references: List[tree_sitter.Node] = []
        if declaration.kind == DeclarationKind.CLASS:
            heritage = child_by_type(node, "class_heritage")
            if heritage is None:
                return references
            for heritage_clause in heritage.named_children:
                if heritage_clause.type == "extends_clause" and clause in (None, "extends"):
                    value = heritage_clause.child_by_field_name("value")
                    if value is None and heritage_clause.named_children:
                        value = heritage_clause.named_children[0]
                    if value is not None:
                        references.append(value)
                elif heritage_clause.type == "implements_clause" and clause in (None, "implements"):
                    references.extend(_heritage_type_names(heritage_clause))
        elif declaration.kind == DeclarationKind.INTERFACE and clause in (None, "extends"):
            extends_clause = child_by_type(node, "extends_type_clause", "extends_clause")
            if extends_clause is not None:
                references.extend(_heritage_type_names(extends_clause))
        return references

    def _infer_call(self, node: tree_sitter.Node) -> Type:
        function_node = node.child_by_field_name("function")
        if function_node is None:
            return ANY_TYPE
        if function_node.type == "identifier":
            name = node_text(function_node)
            symbol = self.resolve_name(name, function_node)
            if (symbol is None or symbol is self._builtins.get(name)) and name in _GLOBAL_CALL_TYPES:
                return _GLOBAL_CALL_TYPES[name]
        elif function_node.type == "member_expression":
            if self._is_math(function_node.child_by_field_name("object")):
                return NUMBER_TYPE
            symbol = self._resolve_member_access(function_node)
        else:
            callee = self._infer_guarded(function_node)
            return callee.return_type if isinstance(callee, FunctionType) else ANY_TYPE
        if symbol is None:
            return ANY_TYPE
        target = self.get_aliased_symbol(symbol)
        declaration = target.value_declaration
        if declaration is None:
            return ANY_TYPE
        if declaration.kind in _FUNCTION_LIKE_KINDS:
            return self.get_signature_from_declaration(declaration).return_type
        callee = self.get_type_of_symbol_at_location(target)
        return callee.return_type if isinstance(callee, FunctionType) else ANY_TYPE

    def _is_math(self, node: Optional[tree_sitter.Node]) -> bool:
        """True for a reference to the global ``Math`` object."""
        return (
            node is not None
            and node.type == "identifier"
            and node_text(node) == "Math"
            and self.resolve_name("Math", node) is None
        )

    def _enclosing_class(self, node: tree_sitter.Node) -> Optional[Declaration]:
        declaration = self.binder.get_enclosing_declaration(node)
        while declaration is not None and declaration.kind != DeclarationKind.CLASS:
            declaration = declaration.container
        return declaration

    # =========================================================================
    # Display
    # =========================================================================

    def type_to_string(self, type_: Type, enclosing_declaration: Optional[Declaration] = None) -> str:
        return type_.display()

    def get_type_arguments(self, type_: Type) -> List[Type]:
        return type_.type_arguments

    def get_constructor_symbol(self, class_symbol: Symbol) -> Optional[Symbol]:
        return class_symbol.members.get(CONSTRUCTOR_SYMBOL_NAME)


def _heritage_type_names(clause: tree_sitter.Node) -> List[tree_sitter.Node]:
    names: List[tree_sitter.Node] = []
    for child in clause.named_children:
        if child.type in ("type_arguments", "comment"):
            continue
        names.append(child)
    return names


def _dedupe_types(types: List[Type]) -> List[Type]:
    seen: Set[str] = set()
    result: List[Type] = []
    for member in types:
        text = member.display()
        if text in seen:
            continue
        seen.add(text)
        result.append(member)
    return result


def _union_of(types: List[Type]) -> Type:
    if not types or any(t.display() == "any" for t in types):
        return ANY_TYPE
    members = _dedupe_types(types)
    if not members:
        return ANY_TYPE
    if len(members) == 1:
        return members[0]
    return UnionType(members)
