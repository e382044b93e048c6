# builder/scaffold.py
"""
Fixed project files every workspace gets next to the user's source.

Nothing here is derived from the request; bump SCAFFOLD_VERSION whenever the
content changes so builds can be traced back to a scaffold revision.
"""

import json
from typing import Dict

SCAFFOLD_VERSION = "1"

ENTRY_FILE = "src/main.jsx"
OUTPUT_DIR = "dist"
OUTPUT_NAME = "artifact"
# vite appends the format to fileName in library mode
ARTIFACT_FILE = f"{OUTPUT_NAME}.iife.js"

# Keep in sync with the versions preinstalled by docker/builder/Dockerfile.
PACKAGE_JSON = {
    "name": "artifact-build",
    "private": True,
    "version": "0.0.0",
    "type": "module",
    "scripts": {
        "build": "vite build",
    },
    "dependencies": {
        "react": "^18.2.0",
        "react-dom": "^18.2.0",
    },
    "devDependencies": {
        "@vitejs/plugin-react": "^4.0.0",
        "vite": "^4.3.9",
    },
}

VITE_CONFIG = f"""import {{ defineConfig }} from 'vite';
import react from '@vitejs/plugin-react';

export default defineConfig({{
  plugins: [react()],
  define: {{
    'process.env': JSON.stringify({{
      NODE_ENV: 'production',
    }})
  }},
  build: {{
    outDir: '{OUTPUT_DIR}',
    emptyOutDir: true,
    minify: true,
    lib: {{
      entry: '{ENTRY_FILE}',
      formats: ['iife'],
      name: 'ArtifactApp',
      fileName: '{OUTPUT_NAME}'
    }},
    rollupOptions: {{
      external: [],
      output: {{
        globals: {{}}
      }}
    }}
  }}
}});
"""

# Preview page only; the library build does not read it.
INDEX_HTML = f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>Artifact Preview</title>
  </head>
  <body>
    <div id="root"></div>
    <script type="module" src="/{ENTRY_FILE}"></script>
  </body>
</html>
"""


def render_scaffold() -> Dict[str, str]:
    """Return {relative filename: content} for the three scaffold files."""
    return {
        "package.json": json.dumps(PACKAGE_JSON, indent=2) + "\n",
        "vite.config.js": VITE_CONFIG,
        "index.html": INDEX_HTML,
    }
