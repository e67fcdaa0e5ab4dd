"""
HTML rendering of the page tree.
"""

from html import escape
from typing import List, Sequence, Tuple, Union

from ..crawler.tree import TreeBranch

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <link href="https://stackpath.bootstrapcdn.com/bootstrap/4.5.2/css/bootstrap.min.css" rel="stylesheet">
</head>
<body>
    <div class="container">
        <h1>{title}</h1>
        <div class="row">
            <div class="col-md-12">
                <ul>
{tree}                </ul>
            </div>
        </div>
    </div>
</body>
</html>
"""


# Indentation stops growing past this level so deep chains stay linear in size
MAX_INDENT_LEVEL = 40


def render_branches(branches: Sequence[TreeBranch], level: int = 0) -> str:
    """
    Render branches as nested <li> items, children in their own <ul>.

    Walks with an explicit stack; closing tags are pushed as plain strings
    below the children they close.
    """
    lines: List[str] = []
    stack: List[Union[str, Tuple[TreeBranch, int]]] = [(branch, level) for branch in reversed(branches)]

    while stack:
        entry = stack.pop()
        if isinstance(entry, str):
            lines.append(entry)
            continue

        branch, depth = entry
        indent = '  ' * min(depth, MAX_INDENT_LEVEL)
        lines.append(f'{indent}<li>\n')
        lines.append(f'{indent}  <a href="{escape(branch.url)}">{escape(branch.label)}</a>\n')
        if not branch.children:
            lines.append(f'{indent}</li>\n')
            continue

        lines.append(f'{indent}  <ul>\n')
        stack.append(f'{indent}</li>\n')
        stack.append(f'{indent}  </ul>\n')
        stack.extend((child, depth + 2) for child in reversed(branch.children))

    return ''.join(lines)


def render_tree_page(forest: Sequence[TreeBranch], title: str = 'Sitemap') -> str:
    """Wrap the rendered forest in a minimal page shell."""
    return PAGE_TEMPLATE.format(title=escape(title), tree=render_branches(forest, level=10))
