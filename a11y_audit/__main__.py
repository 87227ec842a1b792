from a11y_audit.cli import cli

cli()
