"""Slack File Uploader: upload a local file to Slack from a pipeline step.

WHY: Build and release pipelines produce artifacts (screenshots, reports,
archives) that the team wants to see in Slack. Slack retired the one-shot
files.upload method; uploads now go through a three-call external upload
protocol that every caller would otherwise have to re-implement.

HOW: Three layers: config (options with env fallback), api (typed client
for the three Slack calls), action (runs the calls in order and turns any
failure into "no result"). The CLI wraps the action for shell use.

RULES:
- Steps always run in order: get upload URL → send bytes → complete upload
- A failed run returns None; the reason only goes to the log
- The API token is never logged or shown in repr()
"""

__version__ = "0.1.0"
