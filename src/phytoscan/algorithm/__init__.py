"""Pure image-quality and severity algorithms."""
