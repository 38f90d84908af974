"""
Server-side processing of uploaded furniture models.
Uses trimesh to measure bounds and recenter GLB/OBJ files before storage.

Placement treats a template's width/height/length as the model's extents,
so the measured bounds become the product dimensions.
"""

import io
import logging
from typing import Optional, Tuple

import numpy as np
import trimesh

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ('glb', 'obj')


class ModelProcessor:
    """
    Process 3D models to fix bounding boxes and recenter origins.

    Designed for compatibility with Three.js:
    - Preserves GLTF/GLB Y-up coordinate system
    - Exports standard GLB that Three.js can load directly
    - Origin placement matches Three.js expectations
    """

    def process_model(
        self,
        data: bytes,
        file_type: str = 'glb',
        origin_placement: str = 'bottom-center',
        generate_thumbnail: bool = False,
        thumbnail_size: Tuple[int, int] = (256, 256)
    ) -> dict:
        """
        Process a model file: fix bounds, recenter origin, export as GLB.

        Args:
            data: Raw model file bytes
            file_type: 'glb' or 'obj'
            origin_placement: Where to place origin - 'bottom-center', 'center', or 'original'
            generate_thumbnail: Whether to try rendering a thumbnail image
            thumbnail_size: Thumbnail dimensions (width, height)

        Returns:
            dict with:
                - 'glb': Processed GLB bytes
                - 'thumbnail': PNG thumbnail bytes or None
                - 'bounds': Dict with min, max, center, size lists
                - 'dimensions': Dict with width (x), height (y), length (z) in model units
        """
        file_type = file_type.lower()
        if file_type not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported model format: {file_type}")

        scene = trimesh.load(
            io.BytesIO(data),
            file_type=file_type,
            force='scene'  # Always load as scene (handles multi-mesh models)
        )

        if scene.is_empty:
            raise ValueError("Model contains no geometry")

        original_bounds = self._compute_bounds(scene)
        logger.info(f"Original bounds: center={original_bounds['center']}, size={original_bounds['size']}")

        if origin_placement != 'original':
            self._recenter_scene(scene, original_bounds, origin_placement)

        bounds = self._compute_bounds(scene)

        thumbnail_bytes = None
        if generate_thumbnail:
            thumbnail_bytes = self._generate_thumbnail(scene, thumbnail_size)

        size = bounds['size']
        return {
            'glb': scene.export(file_type='glb'),
            'thumbnail': thumbnail_bytes,
            'bounds': bounds,
            'dimensions': {'width': size[0], 'height': size[1], 'length': size[2]}
        }

    def _compute_bounds(self, scene: trimesh.Scene) -> dict:
        bounds = scene.bounds  # [[min_x, min_y, min_z], [max_x, max_y, max_z]]

        if bounds is None:
            raise ValueError("Scene has no bounds (empty geometry)")

        min_pt = bounds[0]
        max_pt = bounds[1]

        return {
            'min': min_pt.tolist(),
            'max': max_pt.tolist(),
            'center': ((min_pt + max_pt) / 2).tolist(),
            'size': (max_pt - min_pt).tolist()
        }

    def _recenter_scene(self, scene: trimesh.Scene, bounds: dict, placement: str):
        """
        Translate all geometry so the origin is at the requested placement.
        Modifies scene in place.
        """
        center = np.array(bounds['center'])
        min_pt = np.array(bounds['min'])

        if placement == 'bottom-center':
            # Center X/Z at 0, bottom Y at 0: the model stands on the floor
            offset = np.array([-center[0], -min_pt[1], -center[2]])
        elif placement == 'center':
            offset = -center
        else:
            raise ValueError(f"Unknown origin placement: {placement}")

        scene.apply_transform(trimesh.transformations.translation_matrix(offset))
        logger.info(f"Applied translation offset: {offset.tolist()}")

    def _generate_thumbnail(self, scene: trimesh.Scene, size: Tuple[int, int]) -> Optional[bytes]:
        """
        Render a thumbnail with trimesh's offscreen viewer.
        Needs pyglet and a display or virtual framebuffer; returns None without one.
        """
        try:
            return scene.save_image(resolution=size, visible=False)
        except Exception as e:
            logger.warning(f"Thumbnail generation failed (may need display): {e}")
            return None
