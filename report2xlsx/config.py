"""Layout constants for report2xlsx, overridable per run."""
import yaml


class ConfigError(ValueError):
    pass


class LayoutConfig:
    """Named constants used by the layout engine.  The defaults reproduce the
    layout of the reporting tool's own exports; pass keyword overrides or load them
    from a YAML file with from_yaml().  Treat instances as read-only."""
    DEFAULTS = {
        'max_image_width_px': 750,      # Wider images are scaled down to this
        'row_height_px': 15,            # Used to estimate how many rows an image covers
        'default_image_scale': 0.5,     # Images without width/height are shown at this scale
        'default_image_height_px': 200,
        'max_column_width': 50,         # In Excel column width units
        'title_font_size': 16,
        'description_font_size': 10,
        'description_color': '808080',
        'cell_font_name': 'Tahoma',
        'default_sheet_name': 'Report',
    }

    def __init__(self, **overrides):
        for key, value in overrides.items():
            if key not in self.DEFAULTS:
                raise ConfigError(f'Unknown layout setting: {key}')
            default = self.DEFAULTS[key]
            if isinstance(default, (int, float)) and (isinstance(value, bool) or not isinstance(value, (int, float))):
                raise ConfigError(f'Layout setting {key} must be a number, not {value!r}')
            if isinstance(default, str) and not isinstance(value, str):
                raise ConfigError(f'Layout setting {key} must be a string, not {value!r}')
            if isinstance(default, (int, float)) and value <= 0:
                raise ConfigError(f'Layout setting {key} must be positive, not {value!r}')
        settings = dict(self.DEFAULTS)
        settings.update(overrides)
        for key, value in settings.items():
            setattr(self, key, value)

    def __repr__(self):
        items = ', '.join(f'{k}={getattr(self, k)!r}' for k in self.DEFAULTS)
        return f'LayoutConfig({items})'

    @classmethod
    def from_yaml(cls, path):
        """Load overrides from a YAML mapping, e.g. "max_column_width: 60" """
        with open(path, 'r') as fp:
            try:
                data = yaml.safe_load(fp)
            except yaml.YAMLError as e:
                raise ConfigError(f'{path}: {e}') from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f'{path}: expected a mapping of layout settings')
        return cls(**data)


DEFAULT_CONFIG = LayoutConfig()
