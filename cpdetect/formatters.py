"""
Output formatters for analysis results.
"""

import json


def format_json(result: dict) -> str:
    return json.dumps(result, indent=2)


def format_text(result: dict) -> str:
    """Plain report: one block per cluster, one row per occurrence."""
    metrics = result['metrics']
    clusters = result['clusters']

    output = [
        f"found {metrics['total_files']} source files of {result['source_type']}",
    ]
    if metrics['skipped_files']:
        output.append(f"skipped {metrics['skipped_files']} unreadable files")
    output.append(
        f"{metrics['cluster_count']} clusters, {metrics['duplicated_lines']} duplicated lines "
        f"({metrics['duplication_ratio']:.1%} of {metrics['total_lines']})"
    )
    output.append(f"top {result['config']['list_top_result']} result:")

    for i, cluster in enumerate(clusters, 1):
        output.append(
            f"  {i}. {cluster['line_count']} lines, {cluster['char_count']} chars, "
            f"{len(cluster['occurrences'])} occurrences"
        )
        for occurrence in cluster['occurrences']:
            output.append(
                f"     {occurrence['file']}: line {occurrence['start_line']}~{occurrence['end_line']}"
            )

    return "\n".join(output)


def format_markdown(result: dict) -> str:
    """Format as a markdown table, e.g. for a pull request comment."""
    clusters = result['clusters']
    if not clusters:
        return "**No code duplication detected**"

    lines = [
        "## Copy-Paste Analysis",
        "",
        f"Found **{result['metrics']['cluster_count']}** duplicated blocks "
        f"in {result['metrics']['total_files']} {result['source_type']} files",
        "",
        "| # | Lines | Chars | Locations |",
        "|---|-------|-------|-----------|",
    ]
    for i, cluster in enumerate(clusters, 1):
        locations = "<br>".join(
            f"`{o['file']}` {o['start_line']}-{o['end_line']}" for o in cluster['occurrences']
        )
        lines.append(f"| {i} | {cluster['line_count']} | {cluster['char_count']} | {locations} |")

    return "\n".join(lines)


FORMATTERS = {
    'text': format_text,
    'json': format_json,
    'markdown': format_markdown,
}


def get_formatter(name: str):
    return FORMATTERS[name]
