"""Palette and fonts shared by the game CSS."""

CSS_VARIABLES = """
@import url('https://fonts.googleapis.com/css2?family=Fredoka:wght@400;600&family=Nunito:wght@400;700&display=swap');

:root {
    --bg-card: #fffaf0;
    --text-primary: #2d2a32;
    --text-secondary: #6b6475;
    --accent-blue: #3a86ff;
    --accent-green: #2a9d5b;
    --accent-red: #e63946;
    --accent-yellow: #f4a261;
    --border-color: #ffbe0b;
    --font-display: 'Fredoka', 'Trebuchet MS', sans-serif;
    --font-body: 'Nunito', system-ui, sans-serif;
}
"""
