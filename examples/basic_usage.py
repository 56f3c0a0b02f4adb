"""Basic usage examples."""
from pixeltrace import ImagePipeline, ProcessingOptions

# --- Example 1: Sticker-style SVG with the background removed ---
pipeline = ImagePipeline(preset="sticker")
result = pipeline.process("examples/logo.png")
result.save("examples/logo_output.svg")

# --- Example 2: Custom thresholds and options ---
pipeline = ImagePipeline(
    config={
        "background": {
            "color_threshold": 20,
        },
        "tracing": {
            "max_bytes": 64 * 1024,
        },
    }
)
options = ProcessingOptions(
    remove_background=True,
    auto_crop=True,
    output_format="vector",
    palette_size=3,
    target_width=512,
    blur_level=1,
)
result = pipeline.process("examples/illustration.png", options)
result.save("examples/illustration_output.svg")

# --- Example 3: Swap a color after tracing ---
if result.colors:
    result = result.recolor(result.colors[0], "#1a73e8")
    print(f"Colors after recolor: {result.colors}")

# --- Example 4: Resized PNG only ---
result = ImagePipeline(preset="photo").process(
    "examples/photo.jpg", ProcessingOptions(remove_background=False, target_width=1080)
)
print(f"PNG size: {len(result.image_bytes)} bytes, {result.width}x{result.height}")
