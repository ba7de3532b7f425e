"""depgraph: transitive dependency graphs and install order for packages."""

__version__ = "0.1.0"
