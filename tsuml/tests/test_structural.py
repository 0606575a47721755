"""Tests for PlantUML class-diagram generation."""

import os

import pytest
from tsuml.core import RenderOptions, convert_to_plant, generate_documentation, generate_documentation_from_sources
from tsuml.core.constants import ASSOCIATION_LINE_PALETTE
from tsuml.core.diagrams.structural import association_color, generate_class_diagram
from tsuml.core.model import Class, File, HeritagePair, Method, Parameter, Property

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


def _plant(sources, **options) -> str:
    files = generate_documentation_from_sources(sources)
    return convert_to_plant(files, RenderOptions(**options))


def _lines(*lines: str) -> str:
    return "\n".join(lines)


# =========================================================================
# Sample TypeScript source fixtures
# =========================================================================

ABSTRACT_CLASS = '''
abstract class AbstractClass {
    abstract ToTest();
}
'''

VECTOR = '''
export class Vector {
    constructor(public x: number, public y: number, public z: number) { }
    static times(k: number, v: Vector) { return new Vector(k * v.x, k * v.y, k * v.z); }
    static minus(v1: Vector, v2: Vector) { return new Vector(v1.x - v2.x, v1.y - v2.y, v1.z - v2.z); }
    static plus(v1: Vector, v2: Vector) { return new Vector(v1.x + v2.x, v1.y + v2.y, v1.z + v2.z); }
    static dot(v1: Vector, v2: Vector) { return v1.x * v2.x + v1.y * v2.y + v1.z * v2.z; }
    static mag(v: Vector) { return Math.sqrt(v.x * v.x + v.y * v.y + v.z * v.z); }
    static norm(v: Vector) {
        var mag = Vector.mag(v);
        var div = (mag === 0) ? Infinity : 1.0 / mag;
        return Vector.times(div, v);
    }
    static cross(v1: Vector, v2: Vector) {
        return new Vector(v1.y * v2.z - v1.z * v2.y,
                          v1.z * v2.x - v1.x * v2.z,
                          v1.x * v2.y - v1.y * v2.x);
    }
}
'''

COLOR = '''
export class Color {
    constructor(public r: number, public g: number, public b: number) { }
    static scale(k: number, v: Color) { return new Color(k * v.r, k * v.g, k * v.b); }
    static plus(v1: Color, v2: Color) { return new Color(v1.r + v2.r, v1.g + v2.g, v1.b + v2.b); }
    static times(v1: Color, v2: Color) { return new Color(v1.r * v2.r, v1.g * v2.g, v1.b * v2.b); }
    static white = new Color(1.0, 1.0, 1.0);
    static grey = new Color(0.5, 0.5, 0.5);
    static black = new Color(0.0, 0.0, 0.0);
    static background = Color.black;
    static defaultColor = Color.black;
    static toDrawingColor(c: Color) {
        var legalize = d => d > 1 ? 1 : d;
        return {
            r: Math.floor(legalize(c.r) * 255),
            g: Math.floor(legalize(c.g) * 255),
            b: Math.floor(legalize(c.b) * 255)
        }
    }
}
'''

SURFACE = '''
import { Vector } from './Vector';
import { Color } from './Color';

export interface Surface {
    diffuse: (pos: Vector) => Color;
    specular: (pos: Vector) => Color;
    reflect: (pos: Vector) => number;
    roughness: number;
}
'''


# =========================================================================
# End-to-end scenarios
# =========================================================================


class TestGoldenOutput:
    def test_greeter(self):
        files = generate_documentation([os.path.join(FIXTURES, "greeter.ts")])
        assert convert_to_plant(files) == _lines(
            "@startuml",
            "class Greeter {",
            "    +greeting: string",
            "    +greet(): string",
            "}",
            "@enduml",
        )

    def test_inheritance(self):
        files = generate_documentation([os.path.join(FIXTURES, "inheritance", "index.ts")])
        assert convert_to_plant(files) == _lines(
            "@startuml",
            "class Animal {",
            "    +name: string",
            "    +move(distanceInMeters?: number): void",
            "}",
            "class Horse extends Animal {",
            "    +move(distanceInMeters?: number): void",
            "}",
            "class Snake extends Animal {",
            "    +move(distanceInMeters?: number): void",
            "}",
            "@enduml",
        )

    def test_abstract_class(self):
        assert _plant({"AbstractClass.ts": ABSTRACT_CLASS}) == _lines(
            "@startuml",
            "abstract class AbstractClass {",
            "    +{abstract} ToTest(): any",
            "}",
            "@enduml",
        )

    def test_enum(self):
        files = generate_documentation([os.path.join(FIXTURES, "semaphore.ts")])
        assert convert_to_plant(files) == _lines(
            "@startuml",
            "enum Semaphore {",
            "    RED",
            "    GREEN",
            "    YELLOW",
            "}",
            "@enduml",
        )

    def test_vector_statics(self):
        assert _plant({"Vector.ts": VECTOR}) == _lines(
            "@startuml",
            "class Vector {",
            "    +x: number",
            "    +y: number",
            "    +z: number",
            "    +{static} times(k: number, v: Vector): Vector",
            "    +{static} minus(v1: Vector, v2: Vector): Vector",
            "    +{static} plus(v1: Vector, v2: Vector): Vector",
            "    +{static} dot(v1: Vector, v2: Vector): number",
            "    +{static} mag(v: Vector): number",
            "    +{static} norm(v: Vector): Vector",
            "    +{static} cross(v1: Vector, v2: Vector): Vector",
            "}",
            "@enduml",
        )

    def test_color_statics(self):
        assert _plant({"Color.ts": COLOR}) == _lines(
            "@startuml",
            "class Color {",
            "    +r: number",
            "    +g: number",
            "    +b: number",
            "    +{static} scale(k: number, v: Color): Color",
            "    +{static} plus(v1: Color, v2: Color): Color",
            "    +{static} times(v1: Color, v2: Color): Color",
            "    +{static} white: Color",
            "    +{static} grey: Color",
            "    +{static} black: Color",
            "    +{static} background: Color",
            "    +{static} defaultColor: Color",
            "    +{static} toDrawingColor(c: Color): { r: number; g: number; b: number; }",
            "}",
            "@enduml",
        )

    def test_function_typed_members(self):
        output = _plant({"Vector.ts": VECTOR, "Color.ts": COLOR, "Surface.ts": SURFACE})
        assert _lines(
            "interface Surface {",
            "    +diffuse: (pos: Vector) => Color",
            "    +specular: (pos: Vector) => Color",
            "    +reflect: (pos: Vector) => number",
            "    +roughness: number",
            "}",
        ) in output

    def test_deterministic(self):
        sources = {"Vector.ts": VECTOR, "Color.ts": COLOR, "Surface.ts": SURFACE}
        assert _plant(sources, associations=True) == _plant(sources, associations=True)


# =========================================================================
# Blocks and member lines
# =========================================================================


class TestBlocks:
    def test_generics_and_heritage_header(self):
        source = '''
interface Comparable<T> { compareTo(other: T): number; }
interface Named { name: string; }
class Base<T> {}
class Box<T extends Named, U> extends Base<T> implements Comparable<Box<T, U>>, Named {
    name = "box";
    compareTo(other: Box<T, U>): number { return 0; }
}
'''
        output = _plant({"main.ts": source})
        assert "interface Comparable<T> {" in output
        assert "class Base<T> {" in output
        assert "class Box<T extends Named, U> extends Base implements Comparable, Named {" in output
        assert "    +compareTo(other: Box<T, U>): number" in output

    def test_interface_extends(self):
        source = "interface A {}\ninterface B {}\ninterface C extends A, B { x?: number; }\n"
        assert _lines("interface C extends A, B {", "    +x?: number", "}") in _plant({"main.ts": source})

    def test_visibility_glyphs(self):
        source = '''
class Glyphs {
    public a = 1;
    private b = 1;
    protected c = 1;
    d = 1;
}
'''
        output = _plant({"main.ts": source})
        assert _lines("    +a: number", "    -b: number", "    #c: number", "    +d: number") in output

    def test_optional_members(self):
        source = "interface Opt {\n    name?: string;\n    run?(fast?: boolean, times = 1): void;\n}\n"
        output = _plant({"main.ts": source})
        assert "    +name?: string" in output
        assert "    +run?(fast?: boolean, times?: number): void" in output

    def test_namespace_nesting(self):
        source = '''
namespace Zoo {
    export class Keeper {}
    export namespace Pens {
        export enum Size { Small }
    }
}
'''
        assert _plant({"main.ts": source}) == _lines(
            "@startuml",
            "namespace Zoo {",
            "    class Keeper {",
            "    }",
            "    namespace Pens {",
            "        enum Size {",
            "            Small",
            "        }",
            "    }",
            "}",
            "@enduml",
        )

    def test_ambient_module_name_is_unquoted(self):
        source = "declare module 'ext' {\n    export class Plugin {}\n}\n"
        assert _plant({"main.ts": source}) == _lines(
            "@startuml",
            "namespace ext {",
            "    class Plugin {",
            "    }",
            "}",
            "@enduml",
        )

    def test_functions_block(self):
        source = '''
export function add(a: number, b: number): number { return a + b; }
export class Calc {}
export function greet(name = "you") { return "hi " + name; }
'''
        assert _plant({"src/math.ts": source}) == _lines(
            "@startuml",
            "class Calc {",
            "}",
            'class "math functions" << (F,#FF7700) >> {',
            "    +add(a: number, b: number): number",
            "    +greet(name?: string): string",
            "}",
            "@enduml",
        )

    def test_namespace_functions_block(self):
        source = "namespace Util {\n    export function noop(): void {}\n}\n"
        output = _plant({"main.ts": source})
        assert _lines(
            "namespace Util {",
            '    class "Util functions" << (F,#FF7700) >> {',
            "        +noop(): void",
            "    }",
            "}",
        ) in output

    def test_constructors_are_not_rendered(self):
        output = _plant({"main.ts": "class A { constructor(x: number) {} }\n"})
        assert "constructor" not in output

    def test_empty_input(self):
        assert convert_to_plant([]) == _lines("@startuml", "@enduml")

    def test_unresolved_heritage_is_omitted(self):
        output = _plant({"main.ts": "class A extends Unknown {}\n"})
        assert "class A {" in output


# =========================================================================
# Associations
# =========================================================================


ZOO = '''
export class Animal {}
export class Keeper {
    favourite: Animal;
    animals: Animal[];
    feed(animal: Animal): void {}
}
'''


class TestAssociationRendering:
    def test_class_level(self):
        output = _plant({"main.ts": ZOO}, associations=True)
        assert output.endswith(_lines(
            "Keeper --> Animal",
            'Keeper --> "*" Animal',
            "@enduml",
        ))

    def test_field_level(self):
        output = _plant({"main.ts": ZOO}, field_associations=True)
        assert output.endswith(_lines(
            "Keeper::favourite --> Animal",
            'Keeper::animals --> "*" Animal',
            "Keeper::feed --> Animal",
            "@enduml",
        ))

    def test_field_level_wins_over_class_level(self):
        both = _plant({"main.ts": ZOO}, associations=True, field_associations=True)
        assert both == _plant({"main.ts": ZOO}, field_associations=True)

    def test_colored_lines(self):
        output = _plant({"main.ts": ZOO}, associations=True, colored_association_lines=True)
        assert "Keeper -[#4E79A7]-> Animal" in output
        assert 'Keeper -[#F28E2B]-> "*" Animal' in output

    def test_colors_without_associations_draw_nothing(self):
        output = _plant({"main.ts": ZOO}, colored_association_lines=True)
        assert "-->" not in output
        assert "-[" not in output

    def test_palette_wraps(self):
        size = len(ASSOCIATION_LINE_PALETTE)
        assert association_color(0) == ASSOCIATION_LINE_PALETTE[0]
        assert association_color(size) == ASSOCIATION_LINE_PALETTE[0]
        assert association_color(size + 3) == ASSOCIATION_LINE_PALETTE[3]

    def test_hand_built_model(self):
        target = Class(name="Engine", file_name="car.ts")
        owner = Class(
            name="Car",
            file_name="car.ts",
            members=(
                Property(name="engine", return_type="Engine", return_type_file="car.ts"),
                Method(
                    name="swap",
                    parameters=(Parameter(name="parts", parameter_type="Engine[]", parameter_type_file="car.ts"),),
                    return_type="void",
                ),
            ),
            extends_class=HeritagePair(),
        )
        output = generate_class_diagram([File(name="car.ts", parts=(target, owner))], RenderOptions(associations=True))
        assert output == _lines(
            "@startuml",
            "class Engine {",
            "}",
            "class Car {",
            "    +engine: Engine",
            "    +swap(parts: Engine[]): void",
            "}",
            "Car --> Engine",
            'Car --> "*" Engine',
            "@enduml",
        )
