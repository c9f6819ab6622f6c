"""Depth-grouped rendering of reverse dependency search results."""

from rich.console import Console
from rich.markup import escape

from sbom_dependents.dependency_graph import DependentInfo


def group_by_depth(records: list[DependentInfo]) -> dict[int, list[DependentInfo]]:
    """
    Partition dependents by depth.

    Args:
        records: Search results.

    Returns:
        Mapping of depth to its dependents, in increasing depth order.
        Members keep their order from records; empty depths are absent.
    """
    groups: dict[int, list[DependentInfo]] = {}
    for record in records:
        groups.setdefault(record.depth, []).append(record)
    return {depth: groups[depth] for depth in sorted(groups)}


def format_report(records: list[DependentInfo]) -> list[str]:
    """Render the depth-grouped listing as plain text lines."""
    lines = []
    for depth, members in group_by_depth(records).items():
        lines.append(f"depth {depth} (num {len(members)}):")
        for i, member in enumerate(members, start=1):
            lines.append(f"\t{i}. {member.name}")
    return lines


def display_report(records: list[DependentInfo], console: Console) -> None:
    """Print the depth-grouped listing to a rich console."""
    for depth, members in group_by_depth(records).items():
        console.print(f"[bold cyan]depth {depth}[/bold cyan] (num {len(members)}):")
        for i, member in enumerate(members, start=1):
            console.print(
                f"\t{i}. {escape(member.name)}", emoji=False, soft_wrap=True
            )


def report_to_dict(package_name: str, records: list[DependentInfo]) -> dict:
    """
    Build a JSON-serializable summary of the search results.

    Args:
        package_name: Target package the search started from.
        records: Search results.

    Returns:
        Dictionary with per-depth dependent lists.
    """
    groups = group_by_depth(records)
    return {
        "package": package_name,
        "total": len(records),
        "max_depth_found": max(groups, default=0),
        "depths": [
            {
                "depth": depth,
                "count": len(members),
                "dependents": [member.name for member in members],
            }
            for depth, members in groups.items()
        ],
    }
