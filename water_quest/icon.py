"""
Heart tray icon in a Windows 3.1 palette.
Run standalone to write heart.ico / heart.png, or call create_heart() for the tray.
"""
from __future__ import annotations
import sys

from PIL import Image, ImageChops, ImageDraw


# Windows 3.1 16-color palette
BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)
RED = (192, 0, 0, 255)
DARK_RED = (128, 0, 0, 255)
PINK = (255, 128, 128, 255)
TEAL = (0, 128, 128, 255)

ICO_SIZES = [16, 32, 48, 64, 128, 256]


def heart_mask(size: int, inset: int = 0) -> Image.Image:
    """Heart silhouette as an 'L' mask, shrunk by ``inset`` pixels."""
    s = size / 64
    mask = Image.new("L", (size, size), 0)
    draw = ImageDraw.Draw(mask)
    r = 14 * s - inset
    lx, rx, cy = 18 * s, 46 * s, 22 * s
    draw.ellipse([lx - r, cy - r, lx + r, cy + r], fill=255)
    draw.ellipse([rx - r, cy - r, rx + r, cy + r], fill=255)
    # Lower point
    draw.polygon([(4 * s + inset * 1.4, 27 * s), (60 * s - inset * 1.4, 27 * s),
                  (32 * s, 58 * s - inset * 1.6)], fill=255)
    return mask


def hatch_layer(size: int, color, spacing: int, line_w: int = 1) -> Image.Image:
    """Diagonal crosshatch over the whole square; clip it with a mask."""
    layer = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    for offset in range(-size, size + 1, spacing):
        draw.line([(0, offset), (size, offset + size)], fill=color, width=line_w)
        draw.line([(0, offset + size), (size, offset)], fill=color, width=line_w)
    return layer


def create_heart(size: int = 64) -> Image.Image:
    """Create the heart icon at ``size`` pixels square."""
    s = size / 64
    w = max(1, int(s))
    fill, shade, light = RED, DARK_RED, PINK

    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    outline = heart_mask(size)
    body = heart_mask(size, inset=max(1, int(2 * s)))

    # Drop shadow
    shadow = Image.new("RGBA", (size, size), (64, 64, 64, 160))
    img.paste(shadow, (w, w), outline)

    img.paste(Image.new("RGBA", (size, size), BLACK), (0, 0), outline)
    img.paste(Image.new("RGBA", (size, size), fill), (0, 0), body)

    # Crosshatch shading on the lower half only
    lower = Image.new("L", (size, size), 0)
    ImageDraw.Draw(lower).rectangle([0, int(34 * s), size, size], fill=255)
    hatch_clip = ImageChops.multiply(body, lower)
    img.paste(hatch_layer(size, shade, max(3, int(4 * s)), max(1, int(0.8 * s))), (0, 0), hatch_clip)

    # 3D highlight on the upper-left lobe
    draw = ImageDraw.Draw(img)
    hr = max(2, int(4 * s))
    hx, hy = int(13 * s), int(16 * s)
    draw.ellipse([hx - hr, hy - hr, hx + hr, hy + hr], fill=light)
    draw.ellipse([hx - hr // 2, hy - hr // 2, hx, hy], fill=WHITE)

    # Water drop in the middle
    dx, dy, dr = int(32 * s), int(30 * s), max(2, int(6 * s))
    draw.polygon([(dx, dy - int(10 * s)), (dx - dr, dy), (dx + dr, dy)], fill=TEAL)
    draw.ellipse([dx - dr, dy - dr, dx + dr, dy + dr], fill=TEAL, outline=BLACK if size >= 32 else None)
    return img


def generate_icon(stem: str = "heart") -> None:
    """Generate <stem>.ico and <stem>.png files."""
    images = [create_heart(sz) for sz in ICO_SIZES]
    # PIL wants the largest ICO frame first
    images[-1].save(f"{stem}.ico", format="ICO", append_images=images[:-1])
    images[-1].save(f"{stem}.png", format="PNG")


if __name__ == "__main__":
    stem = sys.argv[1] if len(sys.argv) > 1 else "heart"
    generate_icon(stem)
    print(f"Generated {stem}.ico and {stem}.png")
