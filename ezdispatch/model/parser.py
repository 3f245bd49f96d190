"""Parse interface declarations into :class:`InterfaceDescriptor` values.

An interface declaration is a class whose public methods are annotated
``async def`` functions returning ``Result[S, E]``::

    class Example:
        @staticmethod
        async def echo(string: str) -> Result[str, EmptyInput]:
            ...

Parsing works on source text (via :mod:`ast`) rather than on live objects so
that duplicate method names, which Python silently overwrites, are rejected.
"""

from __future__ import annotations

import ast
import copy
import inspect
import textwrap
from pathlib import Path

from loguru import logger

from ezdispatch.config.schema import GeneratorConfig
from ezdispatch.model.interface import (
    InterfaceDescriptor,
    MethodSignature,
    ParameterSpec,
    ReceiverKind,
    ResultShape,
)
from ezdispatch.utils.exceptions import ParseError

_RESULT_NAME = "Result"
_INTERFACE_DECORATOR = "interface"
# attributes of the generated proxy class
_RESERVED_METHODS = frozenset({"service", "from_instance"})
# receiver name of generated proxy methods
_RESERVED_PARAMETERS = frozenset({"self"})
# defaults that dataclass fields reject and proxy signatures would share
_MUTABLE_DISPLAYS = (ast.List, ast.Dict, ast.Set, ast.ListComp, ast.DictComp, ast.SetComp)
_MUTABLE_FACTORIES = frozenset({"list", "dict", "set", "bytearray"})


def parse_interface(
    source: str,
    class_name: str | None = None,
    *,
    config: GeneratorConfig | None = None,
) -> InterfaceDescriptor:
    """
    Parse ``source`` and build the descriptor of one interface class.

    Args:
        source: Python module source text.
        class_name: Class to use. When omitted, the module must contain exactly
            one class decorated with ``@interface`` or exactly one class.
        config: Generator settings (sync methods, private methods, result mode).

    Raises:
        ParseError: The source or the declaration is malformed or ambiguous.
    """
    try:
        tree = ast.parse(source)
    except SyntaxError as e:
        raise ParseError(f"invalid Python source: {e.msg}", line=e.lineno) from e
    node = _select_class(tree, class_name)
    return interface_from_node(node, config=config)


def parse_interface_file(
    path: str | Path,
    class_name: str | None = None,
    *,
    config: GeneratorConfig | None = None,
) -> InterfaceDescriptor:
    """Read ``path`` and parse it with :func:`parse_interface`."""
    source = Path(path).read_text(encoding="utf-8")
    return parse_interface(source, class_name, config=config)


def interface_from_class(cls: type, *, config: GeneratorConfig | None = None) -> InterfaceDescriptor:
    """Build a descriptor from a live class using its source code."""
    try:
        source = textwrap.dedent(inspect.getsource(cls))
    except (OSError, TypeError) as e:
        raise ParseError(f"source of {cls.__name__} is not available: {e}", interface=cls.__name__) from e
    return parse_interface(source, cls.__name__, config=config)


def interface_from_node(node: ast.ClassDef, *, config: GeneratorConfig | None = None) -> InterfaceDescriptor:
    """Build a descriptor from an already parsed class definition."""
    cfg = config or GeneratorConfig()
    methods: list[MethodSignature] = []
    bindings = _class_bindings(node)
    class_names = frozenset(bindings)
    variants: dict[str, str] = {}

    for stmt in node.body:
        if not isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            continue
        if not _is_eligible(stmt, include_private=cfg.include_private):
            continue

        rebound = [line for line in bindings[stmt.name] if line != stmt.lineno]
        if rebound:
            raise ParseError(
                f"duplicate method name '{stmt.name}' (also bound on line {rebound[0]})",
                interface=node.name,
                method=stmt.name,
                line=stmt.lineno,
            )
        if stmt.name in _RESERVED_METHODS:
            raise ParseError(
                f"method name '{stmt.name}' is reserved by the generated proxy",
                interface=node.name,
                method=stmt.name,
                line=stmt.lineno,
            )

        method = _parse_method(node.name, stmt, allow_sync=cfg.allow_sync_methods, class_names=class_names)
        clash = variants.get(method.variant_name)
        if clash is not None:
            raise ParseError(
                f"methods '{clash}' and '{method.name}' map to the same request variant '{method.variant_name}'",
                interface=node.name,
                method=method.name,
                line=stmt.lineno,
            )
        variants[method.variant_name] = method.name
        methods.append(method)

    if not methods:
        raise ParseError(f"interface '{node.name}' has no methods", interface=node.name, line=node.lineno)

    descriptor = InterfaceDescriptor(name=node.name, methods=tuple(methods))
    if cfg.result_mode == "uniform":
        _check_uniform_result(descriptor)

    logger.debug(f"Parsed interface {descriptor.name} with {len(descriptor.methods)} methods")
    return descriptor


def _select_class(tree: ast.Module, class_name: str | None) -> ast.ClassDef:
    classes = [stmt for stmt in tree.body if isinstance(stmt, ast.ClassDef)]

    if class_name is not None:
        for cls in classes:
            if cls.name == class_name:
                return cls
        raise ParseError(f"class '{class_name}' not found", interface=class_name)

    marked = [cls for cls in classes if any(_decorator_name(d) == _INTERFACE_DECORATOR for d in cls.decorator_list)]
    if len(marked) == 1:
        return marked[0]
    if len(marked) > 1:
        names = ", ".join(cls.name for cls in marked)
        raise ParseError(f"several classes are marked @interface ({names}); pass a class name")
    if len(classes) == 1:
        return classes[0]
    if not classes:
        raise ParseError("no class declaration found")
    names = ", ".join(cls.name for cls in classes)
    raise ParseError(f"several classes found ({names}); pass a class name")


def _decorator_name(decorator: ast.expr) -> str | None:
    if isinstance(decorator, ast.Call):
        decorator = decorator.func
    if isinstance(decorator, ast.Name):
        return decorator.id
    if isinstance(decorator, ast.Attribute):
        return decorator.attr
    return None


def _is_eligible(stmt: ast.FunctionDef | ast.AsyncFunctionDef, *, include_private: bool) -> bool:
    if stmt.name.startswith("__") and stmt.name.endswith("__"):
        return False
    if stmt.name.startswith("_") and not include_private:
        return False
    for decorator in stmt.decorator_list:
        if _decorator_name(decorator) in {"property", "setter", "getter", "deleter", "cached_property"}:
            return False
    return True


def _receiver_kind(stmt: ast.FunctionDef | ast.AsyncFunctionDef) -> ReceiverKind:
    names = {_decorator_name(d) for d in stmt.decorator_list}
    if "staticmethod" in names:
        return ReceiverKind.STATIC
    if "classmethod" in names:
        return ReceiverKind.CLASS
    return ReceiverKind.INSTANCE


def _parse_method(
    interface: str,
    stmt: ast.FunctionDef | ast.AsyncFunctionDef,
    *,
    allow_sync: bool,
    class_names: frozenset[str] = frozenset(),
) -> MethodSignature:
    is_async = isinstance(stmt, ast.AsyncFunctionDef)
    if not is_async and not allow_sync:
        raise ParseError(
            "method must be declared with 'async def'",
            interface=interface,
            method=stmt.name,
            line=stmt.lineno,
        )

    receiver = _receiver_kind(stmt)
    parameters = _parse_parameters(interface, stmt, receiver, class_names)
    result = _parse_result(interface, stmt)
    return MethodSignature(
        name=stmt.name,
        parameters=parameters,
        result=result,
        receiver=receiver,
        is_async=is_async,
        lineno=stmt.lineno,
    )


def _parse_parameters(
    interface: str,
    stmt: ast.FunctionDef | ast.AsyncFunctionDef,
    receiver: ReceiverKind,
    class_names: frozenset[str] = frozenset(),
) -> tuple[ParameterSpec, ...]:
    args = stmt.args
    if args.vararg is not None or args.kwarg is not None or args.kwonlyargs:
        raise ParseError(
            "variadic and keyword-only parameters cannot become request fields",
            interface=interface,
            method=stmt.name,
            line=stmt.lineno,
        )

    positional = [*args.posonlyargs, *args.args]
    # defaults align with the tail of the positional parameters
    padding: list[ast.expr | None] = [None] * (len(positional) - len(args.defaults))
    defaults = [*padding, *args.defaults]

    if receiver is not ReceiverKind.STATIC:
        if not positional:
            raise ParseError(
                "method has no receiver parameter; mark it @staticmethod",
                interface=interface,
                method=stmt.name,
                line=stmt.lineno,
            )
        positional = positional[1:]
        defaults = defaults[1:]

    parameters: list[ParameterSpec] = []
    for arg, default in zip(positional, defaults):
        if arg.annotation is None:
            raise ParseError(
                f"parameter '{arg.arg}' has no type annotation",
                interface=interface,
                method=stmt.name,
                line=arg.lineno,
            )
        if arg.arg in _RESERVED_PARAMETERS:
            raise ParseError(
                f"parameter name '{arg.arg}' is reserved by the generated proxy",
                interface=interface,
                method=stmt.name,
                line=arg.lineno,
            )
        parameters.append(
            ParameterSpec(
                name=arg.arg,
                annotation=ast.unparse(arg.annotation),
                default=_render_default(interface, stmt, arg, default, class_names) if default is not None else None,
            )
        )
    return tuple(parameters)


def _parse_result(interface: str, stmt: ast.FunctionDef | ast.AsyncFunctionDef) -> ResultShape:
    returns = stmt.returns
    if returns is None:
        raise ParseError(
            "method has no return annotation; declare Result[S, E]",
            interface=interface,
            method=stmt.name,
            line=stmt.lineno,
        )
    if isinstance(returns, ast.Constant) and isinstance(returns.value, str):
        # string annotation, e.g. -> "Result[str, EmptyInput]"
        try:
            returns = ast.parse(returns.value, mode="eval").body
        except SyntaxError as e:
            raise ParseError(
                f"return annotation is not a valid expression: {e.msg}",
                interface=interface,
                method=stmt.name,
                line=stmt.lineno,
            ) from e

    if (
        isinstance(returns, ast.Subscript)
        and _decorator_name(returns.value) == _RESULT_NAME
        and isinstance(returns.slice, ast.Tuple)
        and len(returns.slice.elts) == 2
    ):
        success, error = returns.slice.elts
        return ResultShape(success=ast.unparse(success), error=ast.unparse(error))

    raise ParseError(
        f"return annotation '{ast.unparse(returns)}' is not Result[S, E]",
        interface=interface,
        method=stmt.name,
        line=stmt.lineno,
    )


def _check_uniform_result(descriptor: InterfaceDescriptor) -> None:
    first = descriptor.methods[0].result
    for method in descriptor.methods[1:]:
        if method.result != first:
            raise ParseError(
                f"Incompatible method return type {method.result.annotation()} "
                f"(expected {first.annotation()} in uniform result mode)",
                interface=descriptor.name,
                method=method.name,
                line=method.lineno,
            )


def _class_bindings(node: ast.ClassDef) -> dict[str, list[int]]:
    """Names bound directly in the class body, with every line binding them."""
    bindings: dict[str, list[int]] = {}
    for stmt in node.body:
        names: list[str] = []
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            names.append(stmt.name)
        elif isinstance(stmt, ast.Assign):
            for target in stmt.targets:
                names.extend(_stored_names(target))
        elif isinstance(stmt, ast.AugAssign) or (isinstance(stmt, ast.AnnAssign) and stmt.value is not None):
            names.extend(_stored_names(stmt.target))
        elif isinstance(stmt, (ast.Import, ast.ImportFrom)):
            names.extend((alias.asname or alias.name).split(".")[0] for alias in stmt.names)
        for name in names:
            bindings.setdefault(name, []).append(stmt.lineno)
    return bindings


def _stored_names(target: ast.expr) -> list[str]:
    return [n.id for n in ast.walk(target) if isinstance(n, ast.Name) and isinstance(n.ctx, ast.Store)]


class _QualifyClassNames(ast.NodeTransformer):
    """Rewrite ``NAME`` as ``Cls.NAME`` for names bound in the class body."""

    def __init__(self, class_name: str, names: frozenset[str]) -> None:
        self.class_name = class_name
        self.names = names

    def visit_Name(self, node: ast.Name) -> ast.expr:
        if isinstance(node.ctx, ast.Load) and node.id in self.names:
            qualified = ast.Attribute(value=ast.Name(id=self.class_name, ctx=ast.Load()), attr=node.id, ctx=ast.Load())
            return ast.copy_location(qualified, node)
        return node


def _render_default(
    interface: str,
    stmt: ast.FunctionDef | ast.AsyncFunctionDef,
    arg: ast.arg,
    default: ast.expr,
    class_names: frozenset[str],
) -> str:
    """
    Source text of a parameter default, valid at module level.

    Defaults are evaluated in class scope but the generated request fields and
    proxy methods live at module level, so class attributes get qualified.
    """
    if isinstance(default, _MUTABLE_DISPLAYS) or (
        isinstance(default, ast.Call) and isinstance(default.func, ast.Name) and default.func.id in _MUTABLE_FACTORIES
    ):
        raise ParseError(
            f"parameter '{arg.arg}' has a mutable default '{ast.unparse(default)}'; use None or an immutable value",
            interface=interface,
            method=stmt.name,
            line=arg.lineno,
        )
    return ast.unparse(_QualifyClassNames(interface, class_names).visit(copy.deepcopy(default)))
