# ABOUTME: comicpub packages page images into fixed-layout EPUB comics.
# ABOUTME: See comicpub.packaging for the writer and comicpub.cli for the command line.
