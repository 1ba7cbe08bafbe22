"""
BlockyRig Quickstart

Packs a small humanoid into a box UV atlas, renders the layout guide and
exports it to the engine's .blockymodel format.
"""

from blockyrig import export_blockymodel, pack_model_uvs, render_layout

model = {
    "identifier": "hytale.humanoid",
    "bones": [
        {"name": "root", "pivot": [0, 0, 0], "cubes": [],
         "attachments": [{"name": "ground", "position": [0, 0, 0]}]},
        {"name": "pelvis", "parent": "root", "pivot": [0, 12, 0],
         "cubes": [{"origin": [-4, 12, -2], "size": [8, 12, 4]}]},
        {"name": "head", "parent": "pelvis", "pivot": [0, 24, 0],
         "cubes": [{"origin": [-4, 24, -4], "size": [8, 8, 8]}],
         "attachments": ["head_top"]},
    ],
}

# Pack UVs at 32 px per unit
result = pack_model_uvs(model, density="32x")
print(f"Atlas: {result.atlas_size}x{result.atlas_size}")

# Painting guide for the texture generator
render_layout(result.model).save("humanoid_layout.png")

# Engine format
with open("humanoid.blockymodel", "w") as f:
    f.write(export_blockymodel(result.model))

print("✅ Saved humanoid_layout.png and humanoid.blockymodel")
