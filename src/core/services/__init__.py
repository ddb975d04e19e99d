"""Services: session lifecycle, aggregation pipeline and browse state.

Side effects (printing, prompting) stay in the CLI layer.
"""
