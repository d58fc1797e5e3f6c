"""
Tests for activation — pair selection and config set resolution.
"""

import pytest

from projgen.core.errors import ConfigResolutionError
from projgen.core.models import (
    ActivationContext,
    ActivationPolicy,
    ConfigSet,
    Dependency,
    ProjectDefinition,
    ProjectStructure,
    QuarkusCliGenerate,
)
from projgen.core.services.activation import (
    is_active,
    iter_active_pairs,
    resolve_config_sets,
)


def _definition(id: str, config: ConfigSet | None = None) -> ProjectDefinition:
    return ProjectDefinition(
        id=id,
        group_id="org.acme",
        artifact_id=id,
        package_name=f"org.acme.{id}",
        config=config or ConfigSet(id=f"{id}-own"),
    )


def _structure(
    id: str,
    common: ConfigSet | None = None,
    config_sets: list[ConfigSet] | None = None,
) -> ProjectStructure:
    return ProjectStructure(
        id=id,
        generate=QuarkusCliGenerate(quarkus_extensions="resteasy"),
        common_config=common or ConfigSet(id=f"{id}-common"),
        config_sets=config_sets or [],
    )


# ── Predicate ───────────────────────────────────────────────────────


class TestIsActive:
    def test_literal_match(self):
        assert is_active({"demo"}, "demo")

    def test_not_selected(self):
        assert not is_active({"other"}, "demo")

    def test_regular_expression(self):
        assert is_active({"quarkus-.*"}, "quarkus-cli")
        assert not is_active({"quarkus-.*"}, "springboot")

    def test_expression_must_match_whole_id(self):
        assert not is_active({"quarkus"}, "quarkus-cli")

    def test_invalid_pattern_falls_back_to_literal(self):
        assert is_active({"demo["}, "demo[")
        assert not is_active({"demo["}, "demo")

    def test_empty_selection_all_policy(self):
        assert is_active(set(), "demo", ActivationPolicy.ALL)

    def test_empty_selection_none_policy(self):
        assert not is_active(set(), "demo", ActivationPolicy.NONE)


# ── Pair iteration ──────────────────────────────────────────────────


class TestIterActivePairs:
    def test_definition_major_order(self):
        defs = [_definition("a"), _definition("b")]
        structs = [_structure("x"), _structure("y")]
        pairs = iter_active_pairs(defs, structs, ActivationContext())
        assert [(d.id, s.id) for d, s in pairs] == [
            ("a", "x"), ("a", "y"), ("b", "x"), ("b", "y"),
        ]

    def test_filters_each_side(self):
        defs = [_definition("a"), _definition("b"), _definition("c")]
        structs = [_structure("x"), _structure("y")]
        context = ActivationContext(
            active_definitions=frozenset({"a", "c"}),
            active_structures=frozenset({"y"}),
        )
        pairs = [(d.id, s.id) for d, s in iter_active_pairs(defs, structs, context)]
        assert pairs == [("a", "y"), ("c", "y")]

    def test_same_rule_both_sides_with_none_policy(self):
        defs = [_definition("a")]
        structs = [_structure("x")]
        context = ActivationContext(
            active_definitions=frozenset({"a"}),
            policy=ActivationPolicy.NONE,
        )
        assert list(iter_active_pairs(defs, structs, context)) == []

    def test_each_pair_visited_once(self):
        defs = [_definition("a"), _definition("b")]
        structs = [_structure("x"), _structure("y"), _structure("z")]
        pairs = [(d.id, s.id) for d, s in iter_active_pairs(defs, structs, ActivationContext())]
        assert len(pairs) == len(set(pairs)) == 6

    def test_restartable(self):
        defs = [_definition("a")]
        structs = [_structure("x")]
        context = ActivationContext()
        first = list(iter_active_pairs(defs, structs, context))
        second = list(iter_active_pairs(defs, structs, context))
        assert first == second
        assert len(first) == 1

    def test_lazy(self):
        pairs = iter_active_pairs([_definition("a")], [_structure("x")], ActivationContext())
        assert next(pairs)[0].id == "a"
        with pytest.raises(StopIteration):
            next(pairs)


# ── Config set resolution ───────────────────────────────────────────


class TestResolveConfigSets:
    def test_order_own_common_selected(self):
        definition = _definition("a", ConfigSet(id="own"))
        structure = _structure(
            "x",
            common=ConfigSet(id="common"),
            config_sets=[ConfigSet(id="db"), ConfigSet(id="metrics"), ConfigSet(id="auth")],
        )
        context = ActivationContext(active_config_sets=frozenset({"auth", "db"}))
        resolved = resolve_config_sets(definition, structure, context)
        assert [c.id for c in resolved] == ["own", "common", "db", "auth"]

    def test_inactive_config_sets_excluded(self):
        structure = _structure("x", config_sets=[ConfigSet(id="db")])
        resolved = resolve_config_sets(_definition("a"), structure, ActivationContext())
        assert [c.id for c in resolved] == ["a-own", "x-common"]

    def test_reusable_reference_replaced(self):
        shared = ConfigSet(
            id="shared-1",
            dependencies=[Dependency(group_id="org.postgresql", artifact_id="postgresql")],
            properties={"db": "postgres"},
        )
        structure = _structure(
            "x", config_sets=[ConfigSet(id="db", reusable_config="shared-1")],
        )
        context = ActivationContext(
            active_config_sets=frozenset({"db"}),
            reusable_config_sets=(shared,),
        )
        resolved = resolve_config_sets(_definition("a"), structure, context)
        assert resolved[-1] is shared

    def test_reusable_in_common_config(self):
        shared = ConfigSet(id="shared-1", properties={"k": "v"})
        structure = _structure("x", common=ConfigSet(reusable_config="shared-1"))
        context = ActivationContext(reusable_config_sets=(shared,))
        resolved = resolve_config_sets(_definition("a"), structure, context)
        assert resolved[1] is shared

    def test_first_reusable_match_wins(self):
        first = ConfigSet(id="shared", properties={"k": "1"})
        second = ConfigSet(id="shared", properties={"k": "2"})
        definition = _definition("a", ConfigSet(reusable_config="shared"))
        context = ActivationContext(reusable_config_sets=(first, second))
        resolved = resolve_config_sets(definition, _structure("x"), context)
        assert resolved[0] is first

    def test_missing_reusable_fails(self):
        definition = _definition("a", ConfigSet(id="own", reusable_config="shared-1"))
        with pytest.raises(ConfigResolutionError, match="shared-1") as exc:
            resolve_config_sets(definition, _structure("x"), ActivationContext())
        assert exc.value.reference == "shared-1"

    def test_missing_reusable_in_inactive_set_is_ignored(self):
        structure = _structure(
            "x", config_sets=[ConfigSet(id="db", reusable_config="nowhere")],
        )
        resolved = resolve_config_sets(_definition("a"), structure, ActivationContext())
        assert len(resolved) == 2

    def test_duplicates_kept(self):
        shared = ConfigSet(id="shared", properties={"k": "v"})
        definition = _definition("a", ConfigSet(reusable_config="shared"))
        structure = _structure("x", common=ConfigSet(reusable_config="shared"))
        context = ActivationContext(reusable_config_sets=(shared,))
        resolved = resolve_config_sets(definition, structure, context)
        assert resolved[0] is shared
        assert resolved[1] is shared
