"""Matplotlib-based preview display for rendered images.

Matplotlib is imported lazily so headless renders never need a display
backend.

Example:
    >>> from src.raycast.preview.display import show_preview
    >>> show_preview(renderer.get_image_numpy(), title="Normals")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from src.raycast.preview.export import compute_rmse


def show_preview(
    image: npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: 8-bit image array of shape (H, W, 3).
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(image)
    ax.axis("off")

    if title is None:
        title = f"Render Preview - {image.shape[1]}x{image.shape[0]}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def difference_image(
    image_a: npt.NDArray[np.uint8],
    image_b: npt.NDArray[np.uint8],
    diff_scale: float = 10.0,
) -> npt.NDArray[np.uint8]:
    """Amplified absolute difference of two 8-bit images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )
    diff = np.abs(image_a.astype(np.float64) - image_b.astype(np.float64))
    return np.clip(diff * diff_scale, 0.0, 255.0).astype(np.uint8)


def show_comparison(
    image_a: npt.NDArray[np.uint8],
    image_b: npt.NDArray[np.uint8],
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Display two renders side by side with their amplified difference.

    Useful for checking, for example, legacy against nearest sphere roots.

    Args:
        image_a: First 8-bit image (H, W, 3).
        image_b: Second 8-bit image (H, W, 3).
        labels: Labels for the two images.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until figure is closed.

    Returns:
        RMSE between the two images in channel units.
    """
    import matplotlib.pyplot as plt

    rmse = compute_rmse(image_a, image_b)
    diff = difference_image(image_a, image_b, diff_scale)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(image_a)
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(image_b)
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.3f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
