"""Tests for build:* placeholder block replacement."""

from sitepipe.domain.markup import render_tag, replace_blocks

PAGE = """\
<head>
  <!-- build:css -->
  <link rel="stylesheet" href="assets/css/main.css">
  <!-- endbuild -->
</head>
<body>
    <!-- build:js -->
    <script src="assets/js/a.js"></script>
    <script src="assets/js/b.js"></script>
    <!-- endbuild -->
</body>
"""


class TestRenderTag:
    def test_script(self) -> None:
        assert render_tag("assets/js/app.min.js") == '<script src="assets/js/app.min.js"></script>'

    def test_stylesheet(self) -> None:
        assert render_tag("assets/css/main.min.css") == (
            '<link rel="stylesheet" href="assets/css/main.min.css">'
        )


class TestReplaceBlocks:
    def test_replaces_with_indented_tags(self) -> None:
        html, names = replace_blocks(
            PAGE,
            {"css": ["assets/css/main.min.css"], "js": ["vendor.js", "assets/js/app.min.js"]},
        )
        assert names == ["css", "js"]
        assert html == (
            "<head>\n"
            '  <link rel="stylesheet" href="assets/css/main.min.css">\n'
            "</head>\n"
            "<body>\n"
            '    <script src="vendor.js"></script>\n'
            '    <script src="assets/js/app.min.js"></script>\n'
            "</body>\n"
        )

    def test_second_pass_is_noop(self) -> None:
        replacements = {"css": ["a.css"], "js": ["a.js"]}
        once, _ = replace_blocks(PAGE, replacements)
        twice, names = replace_blocks(once, replacements)
        assert twice == once
        assert names == []

    def test_unassigned_block_removed(self) -> None:
        html, names = replace_blocks(PAGE, {"js": ["app.js"]})
        assert names == ["css", "js"]
        assert "main.css" not in html
        assert "<head>\n</head>" in html

    def test_unassigned_block_kept(self) -> None:
        html, names = replace_blocks(PAGE, {"js": ["app.js"]}, keep_unassigned=True)
        assert names == ["js"]
        assert "<!-- build:css -->" in html
        assert '<script src="app.js"></script>' in html

    def test_no_markers_returns_input(self) -> None:
        html, names = replace_blocks("<p>plain</p>\n", {"js": ["app.js"]})
        assert html == "<p>plain</p>\n"
        assert names == []
