"""
Tests for builder/scaffold.py
"""

import json

from builder.scaffold import ARTIFACT_FILE, render_scaffold


class TestScaffold:
    def test_renders_exactly_three_files(self):
        assert set(render_scaffold()) == {"package.json", "vite.config.js", "index.html"}

    def test_is_deterministic(self):
        assert render_scaffold() == render_scaffold()

    def test_package_json_declares_toolchain(self):
        pkg = json.loads(render_scaffold()["package.json"])
        assert pkg["scripts"]["build"] == "vite build"
        assert "react" in pkg["dependencies"]
        assert "react-dom" in pkg["dependencies"]
        assert "@vitejs/plugin-react" in pkg["devDependencies"]
        assert "vite" in pkg["devDependencies"]

    def test_vite_config_selects_minified_iife_library_build(self):
        config = render_scaffold()["vite.config.js"]
        assert "formats: ['iife']" in config
        assert "fileName: 'artifact'" in config
        assert "outDir: 'dist'" in config
        assert "minify: true" in config
        assert "entry: 'src/main.jsx'" in config

    def test_artifact_name_matches_iife_output(self):
        assert ARTIFACT_FILE == "artifact.iife.js"

    def test_index_html_references_entry(self):
        assert 'src="/src/main.jsx"' in render_scaffold()["index.html"]
