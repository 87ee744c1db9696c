"""Shader graph: nodes that emit GLSL expressions, wired into a graph.

A :class:`DynoGraph` orders its nodes topologically and writes one GLSL
statement per node into a ``dyno_main`` function, declaring every uniform
node it meets beforehand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence


class DynoType(Enum):
    """GLSL value types; each member's value is its GLSL spelling."""

    FLOAT = "float"
    VEC2 = "vec2"
    VEC3 = "vec3"
    VEC4 = "vec4"
    INT = "int"
    IVEC2 = "ivec2"
    IVEC3 = "ivec3"
    IVEC4 = "ivec4"
    MAT3 = "mat3"
    MAT4 = "mat4"
    BOOL = "bool"
    SAMPLER_2D = "sampler2D"
    SAMPLER_2D_ARRAY = "sampler2DArray"


def dyno_type_str(dyno_type: DynoType) -> str:
    """GLSL type name of ``dyno_type``."""
    return DynoType(dyno_type).value


@dataclass
class DynoPort:
    """A named, typed input or output of a node."""

    name: str
    type: DynoType = DynoType.FLOAT
    default_value: str = ""


@dataclass(frozen=True)
class DynoConnection:
    """An edge from one node's output port to another node's input port."""

    from_node: int = -1
    from_port: int = 0
    to_node: int = -1
    to_port: int = 0


class DynoNode:
    """Base class of graph nodes."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.inputs: list[DynoPort] = []
        self.outputs: list[DynoPort] = []

    def generate(self, input_vars: Sequence[str]) -> str:
        """GLSL expression (or statement) for this node."""
        raise NotImplementedError(f"{type(self).__name__} does not generate code")

    def output_type(self) -> DynoType:
        """Type of the primary output."""
        return self.outputs[0].type if self.outputs else DynoType.FLOAT


class MathOp(Enum):
    """Math operations; the value is the GLSL operator or function name."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "mod"
    ABS = "abs"
    FLOOR = "floor"
    CEIL = "ceil"
    FRACT = "fract"
    SIGN = "sign"
    SQRT = "sqrt"
    POW = "pow"
    EXP = "exp"
    LOG = "log"
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    ASIN = "asin"
    ACOS = "acos"
    ATAN = "atan"
    MIN = "min"
    MAX = "max"
    CLAMP = "clamp"
    MIX = "mix"
    STEP = "step"
    SMOOTH_STEP = "smoothstep"
    DOT = "dot"
    CROSS = "cross"
    LENGTH = "length"
    NORMALIZE = "normalize"
    REFLECT = "reflect"


_INFIX_OPS = frozenset({MathOp.ADD, MathOp.SUB, MathOp.MUL, MathOp.DIV})
_UNARY_OPS = frozenset(
    {
        MathOp.ABS, MathOp.FLOOR, MathOp.CEIL, MathOp.FRACT, MathOp.SIGN,
        MathOp.SQRT, MathOp.EXP, MathOp.LOG, MathOp.SIN, MathOp.COS,
        MathOp.TAN, MathOp.ASIN, MathOp.ACOS, MathOp.ATAN, MathOp.LENGTH,
        MathOp.NORMALIZE,
    }
)
_TERNARY_OPS = frozenset({MathOp.CLAMP, MathOp.MIX, MathOp.SMOOTH_STEP})


def _arg(input_vars: Sequence[str], index: int, default: str) -> str:
    return input_vars[index] if len(input_vars) > index else default


class DynoMathNode(DynoNode):
    """Arithmetic or built-in GLSL function applied to its inputs."""

    def __init__(self, op: MathOp, result_type: DynoType = DynoType.FLOAT) -> None:
        super().__init__("math")
        self.op = MathOp(op)
        self.result_type = result_type

        if self.op in _UNARY_OPS:
            names = ("a",)
        elif self.op in _TERNARY_OPS:
            names = ("a", "b", "c")
        else:
            names = ("a", "b")
        self.inputs = [DynoPort(n, result_type) for n in names]

        if self.op in (MathOp.DOT, MathOp.LENGTH):
            self.result_type = DynoType.FLOAT
        elif self.op is MathOp.CROSS:
            self.result_type = DynoType.VEC3
        self.outputs = [DynoPort("result", self.result_type)]

    def generate(self, input_vars: Sequence[str]) -> str:
        args = [_arg(input_vars, i, "0.0") for i in range(3)]
        if self.op in _INFIX_OPS:
            return f"({args[0]} {self.op.value} {args[1]})"
        return f"{self.op.value}({', '.join(args[: len(self.inputs)])})"

    def output_type(self) -> DynoType:
        return self.result_type


class DynoValueNode(DynoNode):
    """A literal GLSL value."""

    def __init__(self, value_type: DynoType, value_str: str) -> None:
        super().__init__("value")
        self.value_type = value_type
        self.value_str = value_str
        self.outputs = [DynoPort("value", value_type)]

    def generate(self, input_vars: Sequence[str]) -> str:
        return self.value_str

    def output_type(self) -> DynoType:
        return self.value_type


class DynoUniformNode(DynoNode):
    """A uniform read; the graph declares it ahead of the main function."""

    def __init__(self, uniform_name: str, uniform_type: DynoType) -> None:
        super().__init__(f"uniform_{uniform_name}")
        self.uniform_name = uniform_name
        self.uniform_type = uniform_type
        self.outputs = [DynoPort("value", uniform_type)]

    def generate(self, input_vars: Sequence[str]) -> str:
        return self.uniform_name

    def output_type(self) -> DynoType:
        return self.uniform_type


class DynoTextureNode(DynoNode):
    """A texture sample from a 2D or 2D-array sampler."""

    def __init__(self, sampler_name: str, is_array: bool = False) -> None:
        super().__init__(f"texture_{sampler_name}")
        self.sampler_name = sampler_name
        self.is_array = is_array
        self.inputs = [DynoPort("uv", DynoType.VEC3 if is_array else DynoType.VEC2)]
        self.outputs = [DynoPort("color", DynoType.VEC4)]

    def generate(self, input_vars: Sequence[str]) -> str:
        uv = _arg(input_vars, 0, "vec2(0.0)")
        return f"texture({self.sampler_name}, {uv})"

    def output_type(self) -> DynoType:
        return DynoType.VEC4


_SWIZZLE_TYPES = {
    1: DynoType.FLOAT,
    2: DynoType.VEC2,
    3: DynoType.VEC3,
    4: DynoType.VEC4,
}


class DynoSwizzleNode(DynoNode):
    """Component selection such as ``xyz`` or ``w``."""

    def __init__(self, swizzle: str) -> None:
        super().__init__("swizzle")
        self.swizzle = swizzle
        self.inputs = [DynoPort("input", DynoType.VEC4)]
        self.outputs = [DynoPort("output", self.output_type())]

    def generate(self, input_vars: Sequence[str]) -> str:
        return f"{_arg(input_vars, 0, 'vec4(0.0)')}.{self.swizzle}"

    def output_type(self) -> DynoType:
        return _SWIZZLE_TYPES.get(len(self.swizzle), DynoType.FLOAT)


class DynoOutputNode(DynoNode):
    """Assignment of a colour to a shader output variable."""

    def __init__(self, output_name: str = "fragColor") -> None:
        super().__init__("output")
        self.output_name = output_name
        self.inputs = [DynoPort("color", DynoType.VEC4)]

    def generate(self, input_vars: Sequence[str]) -> str:
        return f"{self.output_name} = {_arg(input_vars, 0, 'vec4(1.0)')}"


class DynoBranchNode(DynoNode):
    """Ternary selection between two vec4 values."""

    def __init__(self) -> None:
        super().__init__("branch")
        self.inputs = [
            DynoPort("condition", DynoType.BOOL),
            DynoPort("true_val", DynoType.VEC4),
            DynoPort("false_val", DynoType.VEC4),
        ]
        self.outputs = [DynoPort("result", DynoType.VEC4)]

    def generate(self, input_vars: Sequence[str]) -> str:
        cond = _arg(input_vars, 0, "true")
        when_true = _arg(input_vars, 1, "vec4(1.0)")
        when_false = _arg(input_vars, 2, "vec4(0.0)")
        return f"({cond} ? {when_true} : {when_false})"


@dataclass(frozen=True)
class UniformInfo:
    """A uniform found while generating code."""

    name: str
    type: DynoType


@dataclass
class DynoGraph:
    """A graph of shader nodes that renders to GLSL source."""

    _nodes: list[DynoNode] = field(default_factory=list)
    _connections: list[DynoConnection] = field(default_factory=list)
    _uniforms: list[UniformInfo] = field(default_factory=list)

    @property
    def nodes(self) -> tuple[DynoNode, ...]:
        return tuple(self._nodes)

    @property
    def connections(self) -> tuple[DynoConnection, ...]:
        return tuple(self._connections)

    @property
    def uniforms(self) -> tuple[UniformInfo, ...]:
        """Uniforms met by the last code generation, in graph order."""
        return tuple(self._uniforms)

    def add_node(self, node: DynoNode) -> int:
        """Append ``node`` and return its index."""
        self._nodes.append(node)
        return len(self._nodes) - 1

    def connect(self, from_node: int, from_port: int, to_node: int, to_port: int) -> None:
        """Feed an output of ``from_node`` into input ``to_port`` of ``to_node``."""
        self._connections.append(DynoConnection(from_node, from_port, to_node, to_port))

    def get_node(self, index: int) -> Optional[DynoNode]:
        """The node at ``index``, or None when out of range."""
        if 0 <= index < len(self._nodes):
            return self._nodes[index]
        return None

    def _topological_order(self) -> list[int]:
        count = len(self._nodes)
        for c in self._connections:
            for endpoint in (c.from_node, c.to_node):
                if not 0 <= endpoint < count:
                    raise IndexError(f"connection refers to missing node {endpoint}")

        in_degree = [0] * count
        successors: list[list[int]] = [[] for _ in range(count)]
        for c in self._connections:
            in_degree[c.to_node] += 1
            successors[c.from_node].append(c.to_node)

        stack = [i for i, degree in enumerate(in_degree) if degree == 0]
        order: list[int] = []
        while stack:
            node = stack.pop()
            order.append(node)
            for nxt in successors[node]:
                in_degree[nxt] -= 1
                if in_degree[nxt] == 0:
                    stack.append(nxt)
        return order

    def generate_code(self, is_fragment: bool) -> str:
        """GLSL uniform declarations followed by a ``dyno_main`` function.

        Nodes that sit on a cycle are left out.
        """
        order = self._topological_order()

        self._uniforms = [
            UniformInfo(node.uniform_name, node.uniform_type)
            for node in (self._nodes[i] for i in order)
            if isinstance(node, DynoUniformNode)
        ]

        lines: list[str] = []
        declared: set[str] = set()
        for uniform in self._uniforms:
            if uniform.name not in declared:
                declared.add(uniform.name)
                lines.append(f"uniform {dyno_type_str(uniform.type)} {uniform.name};\n")

        lines.append("\nvoid dyno_main() {\n")
        node_vars: dict[int, str] = {}
        for idx in order:
            node = self._nodes[idx]
            input_vars = []
            for port_index, port in enumerate(node.inputs):
                var = port.default_value or "0.0"
                for c in self._connections:
                    if c.to_node == idx and c.to_port == port_index:
                        var = node_vars.get(c.from_node, "")
                input_vars.append(var)

            result = node.generate(input_vars)
            var_name = f"dyno_v{idx}"
            node_vars[idx] = var_name
            if isinstance(node, DynoOutputNode):
                lines.append(f"    {result};\n")
            else:
                lines.append(
                    f"    {dyno_type_str(node.output_type())} {var_name} = {result};\n"
                )
        lines.append("}\n")
        return "".join(lines)

    def generate_vertex_shader(self) -> str:
        """Code for use in a vertex shader."""
        return self.generate_code(False)

    def generate_fragment_shader(self) -> str:
        """Code for use in a fragment shader."""
        return self.generate_code(True)