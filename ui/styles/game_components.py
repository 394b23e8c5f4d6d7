"""Game component CSS styles (phrase card, HUD, result banners)."""

CSS_GAME_COMPONENTS = """
/* ========== PHRASE CARD ========== */
.phrase-card {
    background: var(--bg-card);
    border: 2px solid var(--border-color);
    border-radius: 8px;
    padding: 20px;
}

.phrase-card .phrase-header {
    display: flex;
    justify-content: space-between;
    color: var(--text-secondary);
    font-size: 0.85em;
    margin-bottom: 12px;
}

.phrase-card .phrase-text {
    font-family: var(--font-body);
    font-size: 1.6em;
    line-height: 1.5;
    color: var(--text-primary);
}

.phrase-word.matched {
    color: var(--accent-green);
}

.phrase-word.unmatched {
    color: var(--accent-red);
    text-decoration: underline wavy;
}

/* ========== HUD ========== */
.twister-hud {
    display: flex;
    justify-content: space-between;
    align-items: center;
    font-family: var(--font-display);
    color: var(--accent-yellow);
}

.twister-hud .timer-value {
    font-size: 1.6em;
}

/* ========== STATUS ========== */
.transcript-box {
    color: var(--text-secondary);
    font-style: italic;
    min-height: 1.5em;
}

.advisory {
    color: var(--accent-yellow);
}

.result-banner.success {
    color: var(--accent-green);
    font-weight: 700;
}

.result-banner.failure {
    color: var(--accent-red);
    font-weight: 700;
}

.error-box {
    color: var(--accent-red);
}

/* ========== GAME OVER ========== */
.score-card {
    text-align: center;
    margin: 12px 0;
}

.score-card .score-value {
    font-family: var(--font-display);
    font-size: 2em;
    color: var(--accent-blue);
}
"""
