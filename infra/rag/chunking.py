from typing import List


def chunk_text(text: str, size: int = 1000, overlap: int = 200) -> List[str]:
    """Split text into fixed-size windows; consecutive windows share `overlap` chars.

    Dropping the first `overlap` characters of every chunk after the first and
    concatenating gives back the original text.
    """
    if overlap < 0:
        raise ValueError(f"overlap must not be negative: {overlap}")
    if size <= overlap:
        raise ValueError(
            f"chunk size ({size}) must be greater than overlap ({overlap})")
    out, i = [], 0
    n = len(text)
    step = size - overlap
    while i < n:
        out.append(text[i:i + size])
        if i + size >= n:
            break
        i += step
    return out
