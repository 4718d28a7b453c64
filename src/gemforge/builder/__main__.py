from gemforge.builder import cli

cli.cli()
