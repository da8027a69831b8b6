# Order matters: ties in measured density keep this order.
DEFAULT_CHARACTERS = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz1234567890"
    "!\"#$%&'()-^\\=~|@[`{;:]+*},./_<>?_     "
)

ASCII_PRINTABLE = "".join(chr(i) for i in range(32, 127))

# Block elements: U+2580-U+259F (fills, eighths, halves, quadrants, shades)
BLOCKS = " " + "".join(chr(i) for i in range(0x2580, 0x25A0))

# ASCII characters useful for texture and edges
TEXTURE_ASCII = " .,:;!'-/\\xX*+=#@"

CHARSETS = {
    "default": DEFAULT_CHARACTERS,
    "printable": ASCII_PRINTABLE,
    "blocks": BLOCKS,
    "texture": TEXTURE_ASCII,
}
