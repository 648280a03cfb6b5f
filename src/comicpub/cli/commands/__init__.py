# ABOUTME: Subcommands registered on the comicpub CLI group.
