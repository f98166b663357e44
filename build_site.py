#!/usr/bin/env python3
"""
Static site builder for a folder of markdown study notes.

Features:
- Converts every .md file under the input directory to .html in the output directory
- Preserves directory structure; page title comes from the first "# " heading
- Generates toc.html: a collapsible folder/file tree linking every page
- Pages are converted concurrently on one asyncio event loop

Usage:
  python build_site.py                       # ./**/*.md -> ./dist
  python build_site.py --input notes --output site

Notes:
- Requires the "markdown" package: pip install markdown
"""

from __future__ import annotations

import argparse
import asyncio
import html
import logging
import os
import re
import sys
from pathlib import Path
from typing import Iterable, List, NamedTuple, Optional, Sequence, Set, Tuple
from urllib.parse import quote


# -- markdown conversion --
try:
    import markdown  # type: ignore
except ImportError as exc:  # minimal helpful error
    raise SystemExit(
        "Missing dependency: markdown. Install with 'pip install markdown'"
    ) from exc


logger = logging.getLogger(__name__)

OUTPUT_DIR_NAME = "dist"
TOC_FILENAME = "toc.html"
IGNORED_DIR_NAMES = {"node_modules"}
MARKDOWN_EXTENSIONS = ["extra", "fenced_code", "tables"]

_TITLE_RE = re.compile(r"^#\s+([^\r\n]+?)\r?$", re.MULTILINE)


# -- data structures --
class PageInfo(NamedTuple):
    """A converted page: output path (relative to the output root), source path, title, depth."""

    path: str
    relative_path: str
    title: str
    depth: int


class TreeNode:
    """A node in the TOC tree: a directory (no page) or a file (with a page, no children)."""

    def __init__(self, name: str, path: str, page: Optional[PageInfo] = None):
        self.name = name
        self.path = path
        self.page = page
        self.children: List["TreeNode"] = []

    @property
    def is_dir(self) -> bool:
        return self.page is None

    def find_child(self, name: str) -> Optional["TreeNode"]:
        for child in self.children:
            if child.name == name:
                return child
        return None

    def __repr__(self) -> str:
        kind = "dir" if self.is_dir else "file"
        return f"TreeNode({kind} {self.path!r}, children={len(self.children)})"


# -- helpers: scanning --
def is_markdown_file(path: Path) -> bool:
    return path.name.endswith(".md")


def _is_excluded(name: str, exclude_names: Set[str]) -> bool:
    return name in exclude_names or name.startswith(".")


def _raise_walk_error(err: OSError) -> None:
    raise err


def find_markdown_files(root: Path, exclude_names: Iterable[str] = ()) -> List[Path]:
    """Recursively collect absolute paths of .md files under root.

    Entries named in exclude_names, or starting with ".", are skipped and
    excluded directories are not descended into. An unreadable root raises.
    """
    excluded = set(exclude_names)
    found: List[Path] = []

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        kept = [d for d in dirnames if not _is_excluded(d, excluded)]
        for skipped in sorted(set(dirnames) - set(kept)):
            logger.debug("skip %s", Path(dirpath) / skipped)
        dirnames[:] = kept

        current_dir = Path(dirpath)
        for fname in filenames:
            if _is_excluded(fname, excluded):
                continue
            fpath = current_dir / fname
            # regular files only; symlinks (dangling or not) are skipped
            if is_markdown_file(fpath) and fpath.is_file() and not fpath.is_symlink():
                found.append(fpath.absolute())

    return found


# -- helpers: page conversion --
def render_markdown(md_text: str) -> str:
    """Convert markdown to an HTML fragment."""
    return markdown.markdown(md_text, extensions=MARKDOWN_EXTENSIONS)


def extract_title(md_text: str, md_path: Path) -> str:
    """First top-level heading anywhere in the text, else the filename without .md."""
    match = _TITLE_RE.search(md_text)
    if match:
        return match.group(1)
    return md_path.stem


def output_html_path(src_root: Path, out_root: Path, md_path: Path) -> Path:
    """Map an input markdown path to its HTML path under out_root."""
    rel = md_path.relative_to(src_root)
    html_name = re.sub(r"\.md$", ".html", rel.name)
    return out_root / rel.parent / html_name


def render_page_html(title: str, content_html: str) -> str:
    """Wrap a rendered markdown body in the page template."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)}</title>
    <style>
        body {{
            max-width: 800px;
            margin: 0 auto;
            padding: 2rem;
            font-family: system-ui, -apple-system, sans-serif;
            line-height: 1.6;
            color: #333;
        }}
        pre {{
            background: #f4f4f4;
            padding: 1rem;
            border-radius: 4px;
            overflow-x: auto;
        }}
        code {{
            background: #f4f4f4;
            padding: 0.2rem 0.4rem;
            border-radius: 3px;
        }}
        pre code {{
            background: none;
            padding: 0;
        }}
    </style>
</head>
<body>
    {content_html}
</body>
</html>"""


async def convert_page(md_path: Path, src_root: Path, out_root: Path) -> PageInfo:
    """Convert one markdown file to an HTML page and return its PageInfo."""
    md_text = await asyncio.to_thread(md_path.read_text, encoding="utf-8")
    content_html = render_markdown(md_text)

    rel = md_path.relative_to(src_root)
    out_html_path = output_html_path(src_root, out_root, md_path)
    await asyncio.to_thread(out_html_path.parent.mkdir, parents=True, exist_ok=True)

    title = extract_title(md_text, md_path)
    relative_path = rel.as_posix()
    depth = relative_path.count("/")

    page_html = render_page_html(title, content_html)
    await asyncio.to_thread(out_html_path.write_text, page_html, encoding="utf-8")

    logger.info("✓ %s → %s", relative_path, _display_path(out_html_path))

    return PageInfo(
        path=out_html_path.relative_to(out_root).as_posix(),
        relative_path=relative_path,
        title=title,
        depth=depth,
    )


def _display_path(path: Path) -> str:
    try:
        return path.relative_to(Path.cwd()).as_posix()
    except ValueError:
        return str(path)


# -- helpers: TOC tree --
def locale_key(name: str) -> Tuple[str, str]:
    """Sort key approximating locale collation: case-insensitive, lowercase first on ties.

    Only matches ICU ordering for ASCII names; accented letters and punctuation
    sort by code point after case folding.
    """
    return name.casefold(), name.swapcase()


def build_tree(pages: Iterable[PageInfo]) -> TreeNode:
    """Insert pages into a directory/file tree keyed by output path segments.

    Shared prefixes collapse into shared directory nodes. On a path collision
    the first page wins and later ones are skipped with a warning.
    """
    root = TreeNode(name="Project", path="")

    for page in pages:
        parts = [p for p in page.path.split("/") if p]
        if not parts:
            continue

        current = root
        for i, part in enumerate(parts[:-1]):
            child = current.find_child(part)
            if child is None:
                child = TreeNode(name=part, path="/".join(parts[: i + 1]))
                current.children.append(child)
            elif not child.is_dir:
                logger.warning("skip %s: %s is a page, not a folder", page.relative_path, child.path)
                break
            current = child
        else:
            leaf = parts[-1]
            existing = current.find_child(leaf)
            if existing is None:
                current.children.append(TreeNode(name=leaf, path="/".join(parts), page=page))
            elif existing.is_dir:
                logger.warning("skip %s: %s is a folder", page.relative_path, existing.path)
            else:
                logger.warning(
                    "skip %s: %s already comes from %s",
                    page.relative_path, existing.path, existing.page.relative_path,
                )

    return root


def _child_sort_key(node: TreeNode) -> Tuple[int, Tuple[str, str]]:
    # folders first, then files
    return (0 if node.is_dir else 1), locale_key(node.name)


def render_tree(node: TreeNode) -> str:
    """Render a node as a nested list item; folders are collapsible."""
    if not node.is_dir:
        href = html.escape(quote(node.page.path))
        title = html.escape(node.page.title)
        return f"""
        <li>
          <a href="{href}" class="file-link">
            <span class="file-icon"></span>
            <span>{title}</span>
          </a>
        </li>"""

    child_html = "".join(render_tree(c) for c in sorted(node.children, key=_child_sort_key))
    return f"""
        <li>
          <div class="folder" data-folder>
            <span class="folder-icon"></span>
            <span class="folder-name">{html.escape(node.name)}</span>
          </div>
          <ul class="folder-content">
            {child_html}
          </ul>
        </li>"""


def generate_toc_html(pages: Sequence[PageInfo]) -> str:
    """Build the tree from all pages and render the navigation page."""
    ordered = sorted(pages, key=lambda p: locale_key(p.path))
    root = build_tree(ordered)
    inner_tree = "".join(render_tree(c) for c in sorted(root.children, key=_child_sort_key))
    return render_toc_page(inner_tree, total_pages=len(pages))


def render_toc_page(inner_tree: str, total_pages: int) -> str:
    """Wrap the rendered tree in the navigation page template."""
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>toc</title>
  <style>
    * {{ margin: 0; padding: 0; box-sizing: border-box; }}
    body {{
      font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Oxygen, Ubuntu, Cantarell, sans-serif;
      background-color: #f3f4f6;
      padding: 2rem;
    }}
    .container {{
      max-width: 800px;
      margin: 0 auto;
      background-color: white;
      border-radius: 0.5rem;
      box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1);
      padding: 1.5rem;
    }}
    h1 {{
      font-size: 1.5rem;
      font-weight: bold;
      margin-bottom: 1.5rem;
      color: #1f2937;
    }}
    ul {{ list-style: none; }}
    ul ul {{ margin-left: 1.5rem; margin-top: 0.25rem; }}
    .folder {{
      display: flex;
      align-items: center;
      padding: 0.5rem;
      cursor: pointer;
      border-radius: 0.25rem;
      user-select: none;
    }}
    .folder:hover {{ background-color: #f3f4f6; }}
    .folder-icon {{ margin-right: 0.5rem; font-size: 1rem; }}
    .folder-icon::before {{ content: "📁"; }}
    .folder.open .folder-icon::before {{ content: "📂"; }}
    .folder-name {{ font-weight: 500; color: #374151; }}
    .folder-content {{
      max-height: 0;
      overflow: hidden;
      transition: max-height 0.3s ease-out;
    }}
    .folder-content.open {{
      max-height: 2000px;
      transition: max-height 0.5s ease-in;
    }}
    .file-link {{
      display: flex;
      align-items: center;
      padding: 0.5rem;
      text-decoration: none;
      color: #2563eb;
      border-radius: 0.25rem;
    }}
    .file-link:hover {{
      background-color: #eff6ff;
      color: #1d4ed8;
    }}
    .file-icon {{ margin-right: 0.5rem; }}
    .file-icon::before {{ content: "📄"; }}
    .total-pages {{
      margin-top: 1rem;
      color: #6b7280;
      font-size: 0.875rem;
    }}
  </style>
</head>
<body>
  <div class="container">
    <h1>Directory Tree</h1>
    <ul id="root">
      {inner_tree}
    </ul>
    <p class="total-pages">Total pages: <span id="total-pages">{total_pages}</span></p>
  </div>

  <script>
    document.querySelectorAll("[data-folder]").forEach((folder) => {{
      folder.addEventListener("click", function (e) {{
        e.stopPropagation();
        const content = this.nextElementSibling;
        if (content && content.classList.contains("folder-content")) {{
          this.classList.toggle("open");
          content.classList.toggle("open");
        }}
      }});
    }});

    document.querySelectorAll(".file-link").forEach((link) => {{
      link.addEventListener("click", function () {{
        const fileName = this.querySelector("span:last-child").textContent;
        console.log("Navigating to:", fileName);
      }});
    }});
  </script>
</body>
</html>"""


# -- build --
async def build(src_root: Path, out_root: Path) -> List[PageInfo]:
    """Convert every markdown file under src_root and write the TOC page."""
    logger.info("Starting Markdown to HTML conversion...\n")

    await asyncio.to_thread(out_root.mkdir, parents=True, exist_ok=True)

    exclude_names = IGNORED_DIR_NAMES | {OUTPUT_DIR_NAME, out_root.name}
    md_files = await asyncio.to_thread(find_markdown_files, src_root, exclude_names)

    if not md_files:
        logger.info("No markdown files found!")
        return []

    pages = list(await asyncio.gather(*(convert_page(p, src_root, out_root) for p in md_files)))

    logger.info("\nGenerating table of contents...")
    toc_path = out_root / TOC_FILENAME
    await asyncio.to_thread(toc_path.write_text, generate_toc_html(pages), encoding="utf-8")
    logger.info("✓ %s created", TOC_FILENAME)

    logger.info("\nSuccessfully converted %d file(s) to HTML!", len(md_files))
    logger.info("View all pages at: %s", _display_path(toc_path))
    return pages


# -- CLI --
def configure_logging(verbose: bool = False) -> None:
    """Send plain progress messages to stdout."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert a folder of markdown notes into linked HTML pages.")
    parser.add_argument(
        "--input",
        type=Path,
        default=Path.cwd(),
        help="Folder scanned for .md files (default: current directory)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help=f"Output folder (default: <input>/{OUTPUT_DIR_NAME})",
    )
    parser.add_argument("--verbose", action="store_true", help="Log skipped folders")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    src_root: Path = args.input.expanduser().resolve()
    out_root: Path = (args.output or src_root / OUTPUT_DIR_NAME).expanduser().resolve()

    try:
        asyncio.run(build(src_root, out_root))
    except Exception:
        logger.exception("Build failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
