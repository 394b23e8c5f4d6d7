"""UI styles module - exports combined CSS."""

from ui.styles.variables import CSS_VARIABLES
from ui.styles.game_components import CSS_GAME_COMPONENTS

TWISTER_CSS = CSS_VARIABLES + CSS_GAME_COMPONENTS
