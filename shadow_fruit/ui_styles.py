# ui_styles.py
# Estilos visuais globais do app

import streamlit as st

def apply_global_styles():
    # ==========================================
    # 🎨 ESTILO VISUAL GLOBAL (SOMBRA / NOITE)
    # ==========================================
    st.markdown("""
    <style>
    @import url('https://fonts.googleapis.com/css2?family=Cinzel:wght@600;700&family=Inter:wght@400;500;600;700&display=swap');

    :root{
      --sf-bg: #07060d;
      --sf-panel: rgba(38, 28, 66, 0.55);
      --sf-border: rgba(139, 92, 246, 0.35);
      --sf-ink: #e9e5f5;
      --sf-ink2: #a59cc4;
      --sf-accent: #8b5cf6;
      --sf-accent-border: #7c3aed;
      --sf-warn: #f59e0b;
    }

    /* =========================================================
       1) FUNDO
       ========================================================= */
    html, body{
      background: var(--sf-bg) !important;
    }
    .stApp{
      background:
        radial-gradient(circle at 15% 0%, rgba(139,92,246,0.16), transparent 40%),
        radial-gradient(circle at 85% 25%, rgba(76,29,149,0.18), transparent 45%),
        var(--sf-bg) !important;
    }
    div[data-testid="stHeader"]{ background: transparent !important; }

    /* =========================================================
       2) TIPOGRAFIA
       ========================================================= */
    .stApp, .stMarkdown, .stMarkdown p, .stMarkdown span, li, label {
      font-family: "Inter", sans-serif !important;
      color: var(--sf-ink) !important;
    }
    h1, h2, h3, h4, .sf-title {
      font-family: "Cinzel", serif !important;
      color: #f5f3ff !important;
      letter-spacing: 0.04em;
    }

    /* =========================================================
       3) PAINÉIS (expanders numerados)
       ========================================================= */
    div[data-testid="stExpander"]{
      background: var(--sf-panel);
      border: 1px solid var(--sf-border) !important;
      border-radius: 14px !important;
      margin-bottom: 12px;
    }
    [data-testid="stExpander"] summary,
    [data-testid="stExpander"] svg{
      font-family: sans-serif !important;
    }

    /* =========================================================
       4) PILLS / CHIPS do resumo
       ========================================================= */
    .sf-pill{
      display:inline-flex;
      align-items:center;
      white-space:nowrap;
      background: rgba(15, 10, 30, 0.75);
      border: 1px solid var(--sf-border);
      color: var(--sf-ink);
      padding: 4px 10px;
      margin: 2px 4px 2px 0;
      border-radius: 999px;
      font-size: 12px;
      font-weight: 600;
    }
    .sf-kind{
      background: var(--sf-accent);
      color: #0b0716;
      border-color: var(--sf-accent-border);
      font-weight: 800;
    }
    .sf-spu-warn{ color: var(--sf-warn) !important; font-weight: 700; }

    /* =========================================================
       5) Botões
       ========================================================= */
    div.stButton > button, div.stDownloadButton > button{
      background: var(--sf-accent) !important;
      color: #0b0716 !important;
      border: 2px solid var(--sf-accent-border) !important;
      border-radius: 12px !important;
      font-weight: 700 !important;
    }
    div.stButton > button:hover{ filter: brightness(1.08); transform: translateY(-1px); }

    /* =========================================================
       6) Impressão: esconde controles, mantém o resumo
       ========================================================= */
    @media print {
      div[data-testid="stSidebar"], div.stButton, div[data-testid="stHeader"]{ display:none !important; }
      .stApp{ background: #fff !important; }
      .stApp, .stMarkdown p, li { color: #000 !important; }
    }
    </style>
    """, unsafe_allow_html=True)


def pill(text: str, extra_class: str = "") -> str:
    cls = f"sf-pill {extra_class}".strip()
    return f'<span class="{cls}">{text}</span>'
