from io import BytesIO

from PIL import Image


def render_thumbnail(path: str, width: int) -> bytes:
    """Resize the image at ``path`` to ``width`` pixels wide, keeping its aspect ratio."""
    with Image.open(path) as img:
        fmt = img.format or "PNG"
        height = max(1, round(img.height * width / img.width))
        thumb = img.resize((width, height))
        out = BytesIO()
        thumb.save(out, format=fmt)
        return out.getvalue()
