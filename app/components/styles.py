from __future__ import annotations

import streamlit as st

from config import THEME


APP_TITLE = "Creative Kids Hub"


def apply_theme() -> None:
    st.set_page_config(
        page_title=APP_TITLE,
        page_icon="🌈",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    # Theme tokens (config.py) -> CSS variables
    radius = int(THEME["radius_px"])
    css = """
<style>
@import url('https://fonts.googleapis.com/css2?family=Nunito:wght@400;600;700;800&display=swap');

:root{
  --orange-500: __ORANGE_500__;
  --orange-400: __ORANGE_400__;
  --purple-900: __PURPLE_900__;
  --purple-800: __PURPLE_800__;

  --bg-primary: __BG_PRIMARY__;
  --bg-secondary: __BG_SECONDARY__;
  --card-bg: __CARD_BG__;
  --card-border: __CARD_BORDER__;

  --text-primary: __TEXT_PRIMARY__;
  --text-secondary: __TEXT_SECONDARY__;
  --shadow: __SHADOW__;
  --radius: __RADIUS_PX__px;
}

#MainMenu { visibility: hidden; }
footer { visibility: hidden; }

html, body, [data-testid="stAppViewContainer"]{
  background: var(--bg-primary) !important;
  font-family: "Nunito", system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif !important;
  color: var(--text-primary) !important;
}

[data-testid="stSidebar"]{
  background: var(--bg-secondary) !important;
  border-right: 1px solid var(--card-border) !important;
}
[data-testid="stSidebar"] div[role="radiogroup"] > label{
  border-radius: 999px !important;
  padding: 6px 12px !important;
  margin: 0 0 4px 0 !important;
}
[data-testid="stSidebar"] div[role="radiogroup"] > label:has(input:checked){
  background: rgba(249, 115, 22, 0.12) !important;
}

.block-container{
  padding-top: 1rem !important;
  padding-bottom: 2rem !important;
}

/* Header */
.ckh-header{
  display:flex;
  align-items:center;
  justify-content:space-between;
  gap: 12px;
  background: var(--bg-secondary);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  padding: 10px 16px;
  margin: 0 0 16px 0;
}
.ckh-header-left{ display:flex; align-items:center; gap: 10px; }
.ckh-title{ font-size: 22px; font-weight: 800; color: var(--purple-900); line-height: 1.1; }
.ckh-subtitle{ font-size: 14px; font-weight: 600; color: var(--text-secondary); }
.pill{
  display:inline-flex;
  align-items:center;
  gap:6px;
  background: white;
  border: 1px solid var(--card-border);
  border-radius: 999px;
  padding: 6px 12px;
  font-size: 13px;
  font-weight: 700;
  color: var(--purple-800);
}
.pill .dot{ width:8px; height:8px; border-radius:999px; background: var(--orange-500); display:inline-block; }

/* Page intro */
.page-intro{ margin: 0 0 14px 0; }
.page-intro-title{ font-size: 30px; font-weight: 800; color: var(--purple-900); }
.page-intro-subtitle{ font-size: 16px; color: var(--text-secondary); }

/* Marketing hero + program cards */
.hero{
  background: linear-gradient(120deg, #FFEDD5 0%, #EDE9FE 100%);
  border-radius: var(--radius);
  padding: 28px 24px;
  margin-bottom: 18px;
}
.hero-title{ font-size: 40px; font-weight: 800; color: var(--purple-900); line-height: 1.05; margin-bottom: 8px; }
.hero-narrative{ font-size: 17px; color: var(--text-secondary); line-height: 1.5; margin: 0; }
.section-title{ font-size: 24px; font-weight: 800; color: var(--purple-900); margin: 18px 0 10px 0; }
.program-card{
  background: var(--card-bg);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  padding: 16px;
  min-height: 150px;
}
.program-card-icon{ font-size: 30px; }
.program-card-title{ font-size: 18px; font-weight: 800; color: var(--purple-800); margin: 6px 0; }
.program-card-body{ font-size: 15px; color: var(--text-secondary); line-height: 1.5; }

/* Leaderboard */
.leader-row{
  display:flex; align-items:center; justify-content:space-between;
  padding: 8px 12px; margin-bottom: 6px;
  border-radius: 12px; background: var(--card-bg); border: 1px solid var(--card-border);
}
.leader-rank{ font-weight: 800; width: 32px; color: var(--purple-800); }
.leader-name{ flex: 1; font-weight: 700; }
.leader-xp{ font-weight: 800; color: var(--orange-500); }

/* Metric cards */
.metric-card{
  background: var(--card-bg);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  padding: 12px 14px;
}
.metric-label{ font-size: 14px; font-weight: 600; color: var(--text-secondary); margin-bottom: 6px; }
.metric-value{ font-size: 26px; font-weight: 800; color: var(--text-primary); line-height: 1.2; }

/* Share bars */
.share-row{ margin: 8px 0; }
.share-row-head{ display:flex; justify-content:space-between; font-size: 14px; text-transform: capitalize; }
.share-track{ background: #F3F4F6; border-radius: 999px; height: 8px; margin-top: 4px; }
.share-fill{ background: var(--orange-500); border-radius: 999px; height: 8px; }

/* Status badges */
.badge{
  display:inline-block;
  border: 1px solid;
  border-radius: 999px;
  padding: 1px 10px;
  font-size: 12px;
  font-weight: 700;
  text-transform: capitalize;
  background: white;
}

/* Buttons */
div.stButton > button, div.stFormSubmitButton > button{
  border-radius: 999px !important;
  font-weight: 700 !important;
}
div.stFormSubmitButton > button{
  background: var(--orange-500) !important;
  color: white !important;
  border: 1px solid transparent !important;
}

/* Charts on card surface */
div[data-testid="stPlotlyChart"]{
  background: var(--card-bg);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  padding: 8px 10px;
}

.callout{
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  padding: 12px 14px;
  margin: 10px 0;
  background: #FFFFFF;
}
.callout-title{ font-size: 15px; font-weight: 800; color: var(--purple-900); margin-bottom: 4px; }
.callout-body{ font-size: 14px; color: var(--text-secondary); line-height: 1.5; }
.callout-info{ border-left: 4px solid var(--purple-800); }
.callout-action{ border-left: 4px solid var(--orange-500); }

.subtle{ color: var(--text-secondary); font-size: 14px; }
</style>
"""

    tokens = {
        "__ORANGE_500__": str(THEME["accent_primary"]),
        "__ORANGE_400__": str(THEME["accent_secondary"]),
        "__PURPLE_900__": str(THEME["purple_900"]),
        "__PURPLE_800__": str(THEME["purple_800"]),
        "__BG_PRIMARY__": str(THEME["bg_primary"]),
        "__BG_SECONDARY__": str(THEME["bg_secondary"]),
        "__CARD_BG__": str(THEME["bg_card"]),
        "__CARD_BORDER__": str(THEME["border_color"]),
        "__TEXT_PRIMARY__": str(THEME["text_primary"]),
        "__TEXT_SECONDARY__": str(THEME["text_secondary"]),
        "__SHADOW__": str(THEME["shadow"]),
        "__RADIUS_PX__": str(radius),
    }
    for k, v in tokens.items():
        css = css.replace(k, v)

    st.markdown(css, unsafe_allow_html=True)
