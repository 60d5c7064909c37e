from collections.abc import Sequence

from nvr_exports.schemas.export import Export


def normalize_name(value: str) -> str:
    return value.lower().replace("_", " ")


def filter_exports(
    exports: Sequence[Export] | None, search: str
) -> list[Export] | None:
    """Exports whose name contains ``search``, ignoring case and underscores.

    An empty search or a missing collection returns the input as a list (or
    ``None``), in registry order.
    """
    if not search or exports is None:
        return list(exports) if exports is not None else None

    term = normalize_name(search)
    return [exp for exp in exports if term in normalize_name(exp.name)]


def visible_ids(exports: Sequence[Export] | None, search: str) -> set[str]:
    return {exp.id for exp in filter_exports(exports, search) or []}
