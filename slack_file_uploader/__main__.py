"""Package entry point for ``python -m slack_file_uploader``.

WHY: Pipelines run the uploader as ``python -m slack_file_uploader
--file-path build/report.xml --channels releases``. Python's ``-m`` flag
looks for ``__main__.py`` inside the package and executes it.

HOW: Delegates to the CLI's main() function.
"""

from slack_file_uploader.cli import main

if __name__ == "__main__":
    main()
