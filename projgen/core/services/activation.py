"""
Activation service — select descriptor pairs and resolve their config.

Two resolvers live here:

    iter_active_pairs      definitions × structures, filtered by activation
    resolve_config_sets    layered config sets applicable to one pair

Both are pure: they read the descriptors and the ``ActivationContext``
and never touch the filesystem.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from projgen.core.errors import ConfigResolutionError
from projgen.core.models.activation import ActivationContext, ActivationPolicy
from projgen.core.models.descriptor import ConfigSet, ProjectDefinition, ProjectStructure

logger = logging.getLogger(__name__)


def is_active(
    active_ids: Iterable[str],
    item_id: str,
    policy: ActivationPolicy = ActivationPolicy.ALL,
) -> bool:
    """Whether ``item_id`` is selected by the active expressions.

    An expression selects an id when it equals it or when it fully
    matches it as a regular expression. An empty selection is resolved
    by ``policy``.
    """
    expressions = list(active_ids)
    if not expressions:
        return policy is ActivationPolicy.ALL

    for expression in expressions:
        if expression == item_id:
            return True
        try:
            if re.fullmatch(expression, item_id):
                return True
        except re.error:
            # Not a valid pattern, so only the literal comparison applies
            continue
    return False


def iter_active_pairs(
    definitions: list[ProjectDefinition],
    structures: list[ProjectStructure],
    context: ActivationContext,
) -> Iterator[tuple[ProjectDefinition, ProjectStructure]]:
    """Yield active (definition, structure) pairs.

    Definitions are the outer loop and structures the inner one, both in
    input order. Each call returns a fresh iterator.
    """
    for definition in definitions:
        if not is_active(context.active_definitions, definition.id, context.policy):
            logger.debug("Definition '%s' is not active", definition.id)
            continue
        for structure in structures:
            if not is_active(context.active_structures, structure.id, context.policy):
                continue
            yield definition, structure


def resolve_config_sets(
    definition: ProjectDefinition,
    structure: ProjectStructure,
    context: ActivationContext,
) -> list[ConfigSet]:
    """Resolve the config sets applicable to a definition/structure pair.

    Order: the definition's own config, the structure's common config,
    then the structure's config sets whose id is active, in declaration
    order. Reusable references are replaced by the referenced set.

    Raises:
        ConfigResolutionError: If a reusable reference has no match.
    """
    applicable = [definition.config, structure.common_config]
    applicable.extend(
        config_set
        for config_set in structure.config_sets
        if config_set.id in context.active_config_sets
    )
    return [_resolve_reusable(config_set, context) for config_set in applicable]


def _resolve_reusable(config_set: ConfigSet, context: ActivationContext) -> ConfigSet:
    if config_set.reusable_config is None:
        return config_set
    for reusable in context.reusable_config_sets:
        if reusable.id == config_set.reusable_config:
            logger.debug(
                "Config set '%s' resolved to reusable '%s'",
                config_set.id, reusable.id,
            )
            return reusable
    raise ConfigResolutionError(config_set.reusable_config)
