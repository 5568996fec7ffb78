"""
Example demonstrating how to convert a PDF's text layer to Markdown.
"""

import sys

from layout_parse import HeuristicConfig, MarkdownConverter, PdfDocument

pdf_path = sys.argv[1] if len(sys.argv) > 1 else "test.pdf"  # local path to your pdf file

# Slightly more eager heading detection than the default ratio of 1.15
config = HeuristicConfig(heading_ratio=1.1)

converter = MarkdownConverter(
    config=config,
    prefer_tagged=True,  # Use the structure tree when every page has one
    show_progress=True,
)

with PdfDocument(pdf_path) as document:
    markdown_pages = converter.convert_pages(document)

for i, page_content in enumerate(markdown_pages):
    print(f"\n--- Page {i+1} ---\n{page_content}")

    # Optionally save each page as a separate markdown file
    with open(f"output_page_{i+1}.md", "w", encoding="utf-8") as f:
        f.write(page_content)

# Combine non-empty pages the same way MarkdownConverter.convert does
with open("output_combined.md", "w", encoding="utf-8") as f:
    f.write("\n\n---\n\n".join(page for page in markdown_pages if page.strip()))

print(f"Converted {len(markdown_pages)} pages to markdown.")
