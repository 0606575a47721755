"""Tests for output filters: only_interfaces, only_classes and target_class."""

import pytest
from tsuml.core import ConfigurationError, RenderOptions, convert_to_plant, generate_documentation_from_sources
from tsuml.core.diagrams.filters import apply_filters, hierarchy_chain, iter_type_nodes

HIERARCHY = '''
export interface Living { alive: boolean; }
export interface Pet extends Living { owner: string; }
export class Animal implements Living { alive = true; }
export class Dog extends Animal implements Pet { owner = ""; }
export class Puppy extends Dog {}
export class Cat extends Animal {}
export class Rock {}
export enum Color { Brown }
export namespace Wild {
    export class Wolf extends Dog {}
    export interface Den {}
}
'''


@pytest.fixture
def files():
    return generate_documentation_from_sources({"zoo.ts": HIERARCHY})


def _names(files):
    return [name for name, _ in iter_type_nodes(files)]


# =========================================================================
# Options validation
# =========================================================================


class TestRenderOptions:
    def test_defaults(self):
        options = RenderOptions()
        assert options.format == "plantuml"
        assert not options.draws_associations

    def test_conflicting_filters(self):
        with pytest.raises(ConfigurationError):
            RenderOptions(only_interfaces=True, only_classes=True)

    def test_unknown_format(self):
        with pytest.raises(ConfigurationError):
            RenderOptions(format="graphviz")

    def test_empty_target_class(self):
        with pytest.raises(ConfigurationError):
            RenderOptions(target_class="  ")

    def test_from_mapping(self):
        options = RenderOptions.from_mapping({
            "associations": True,
            "format": "Mermaid",
            "input": ["a.ts"],
            "target_class": None,
        })
        assert options.associations
        assert options.format == "mermaid"
        assert options.target_class is None


# =========================================================================
# Kind filters
# =========================================================================


class TestKindFilters:
    def test_no_filters_keep_everything(self, files):
        assert apply_filters(files, RenderOptions()) == files

    def test_only_interfaces(self, files):
        filtered = apply_filters(files, RenderOptions(only_interfaces=True))
        assert _names(filtered) == ["Living", "Pet", "Wild.Den"]

    def test_only_classes(self, files):
        filtered = apply_filters(files, RenderOptions(only_classes=True))
        assert _names(filtered) == ["Animal", "Dog", "Puppy", "Cat", "Rock", "Wild.Wolf"]

    def test_functions_are_dropped_by_kind_filters(self):
        files = generate_documentation_from_sources({"a.ts": "export class A {}\nexport function f() {}\n"})
        output = convert_to_plant(files, RenderOptions(only_classes=True))
        assert "functions" not in output

    def test_empty_namespaces_are_dropped(self):
        files = generate_documentation_from_sources({"a.ts": "namespace N { export enum E { X } }\nclass A {}\n"})
        output = convert_to_plant(files, RenderOptions(only_classes=True))
        assert "namespace" not in output
        assert "class A {" in output

    def test_input_is_not_mutated(self, files):
        before = _names(files)
        apply_filters(files, RenderOptions(only_interfaces=True))
        assert _names(files) == before


# =========================================================================
# Target class
# =========================================================================


class TestTargetClass:
    def test_ancestors_and_descendants(self, files):
        filtered = apply_filters(files, RenderOptions(target_class="Dog"))
        assert _names(filtered) == ["Living", "Pet", "Animal", "Dog", "Puppy", "Wild.Wolf"]

    def test_leaf(self, files):
        filtered = apply_filters(files, RenderOptions(target_class="Cat"))
        assert _names(filtered) == ["Living", "Animal", "Cat"]

    def test_interface_root(self, files):
        filtered = apply_filters(files, RenderOptions(target_class="Pet"))
        assert _names(filtered) == ["Living", "Pet", "Dog", "Puppy", "Wild.Wolf"]

    def test_qualified_name(self, files):
        filtered = apply_filters(files, RenderOptions(target_class="Wild.Wolf"))
        assert "Wild.Wolf" in _names(filtered)
        assert "Cat" not in _names(filtered)

    def test_unknown_target(self, files):
        with pytest.raises(ConfigurationError):
            apply_filters(files, RenderOptions(target_class="Unicorn"))

    def test_enum_is_not_a_target(self, files):
        with pytest.raises(ConfigurationError):
            hierarchy_chain(files, "Color")

    def test_combined_with_only_interfaces(self, files):
        filtered = apply_filters(files, RenderOptions(target_class="Dog", only_interfaces=True))
        assert _names(filtered) == ["Living", "Pet"]

    def test_rendered_output(self, files):
        output = convert_to_plant(files, RenderOptions(target_class="Cat"))
        assert "class Cat extends Animal {" in output
        assert "Rock" not in output
        assert "Dog" not in output

    def test_same_name_in_other_file_is_not_an_ancestor(self):
        files = generate_documentation_from_sources({
            "a.ts": "export class Base { id: number; }\n",
            "b.ts": "export class Base { other: string; }\nexport class Child extends Base {}\n",
        })
        filtered = apply_filters(files, RenderOptions(target_class="Child"))
        assert [(node.file_name, name) for name, node in iter_type_nodes(filtered)] == [
            ("b.ts", "Base"),
            ("b.ts", "Child"),
        ]
        assert "+id: number" not in convert_to_plant(files, RenderOptions(target_class="Child"))

    def test_renamed_import_is_a_descendant(self):
        files = generate_documentation_from_sources({
            "a.ts": "export class A {}\n",
            "c.ts": "import { A as Alias } from './a';\nexport class C extends Alias {}\n",
        })
        filtered = apply_filters(files, RenderOptions(target_class="A"))
        assert [(node.file_name, name) for name, node in iter_type_nodes(filtered)] == [("a.ts", "A"), ("c.ts", "C")]
        assert "class C extends A {" in convert_to_plant(files, RenderOptions(target_class="A"))
