"""Core helpers: filename resolution and the pipeline context.

WHY: These pieces carry no HTTP concerns and are shared by the action and
the CLI, so they live apart from the API client.
"""
