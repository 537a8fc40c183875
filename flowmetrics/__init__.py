"""flowmetrics: information flow metrics for JavaScript projects.

Parses every JavaScript file under a project root with tree-sitter, builds
a project-wide call graph and reports fan-in/fan-out, coupling, cohesion
and information flow complexity.
"""

__version__ = "0.1.0"
