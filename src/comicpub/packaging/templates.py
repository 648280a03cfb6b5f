# ABOUTME: Static container entries and page markup templates for comic packages.
# ABOUTME: Page templates are filled with str.format using the page's pixel size.

CONTENT_DIR = "OEBPS"
PACKAGE_DOCUMENT = "content.opf"
NAVIGATION_DOCUMENT = "nav.xhtml"

MIMETYPE = "application/epub+zip"

CONTAINER_XML = f"""<?xml version="1.0" encoding="UTF-8" ?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{CONTENT_DIR}/{PACKAGE_DOCUMENT}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>"""

# Placeholders: lang, title, width, height, view_width, offset_x, href.
# Regular pages use view_width == width and offset_x == 0. Spread halves use
# half the width; the right half shifts the image left by that half.
PAGE_XML = """<?xml version="1.0" encoding="utf-8"?>
<html lang="{lang}" xml:lang="{lang}" xmlns="http://www.w3.org/1999/xhtml">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width={view_width}, height={height}" />
    <title>{title}</title>
  </head>
  <body>
    <svg width="{view_width}" height="{height}" viewBox="0 0 {view_width} {height}" version="1.1" xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" xml:space="preserve">
        <image x="{offset_x}" y="0" width="{width}" height="{height}" xlink:href="{href}"/>
    </svg>
  </body>
</html>"""
