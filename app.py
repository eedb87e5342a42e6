# app.py
# Shadow Fruit System: calculadora de sombras (Streamlit)
import streamlit as st

from shadow_fruit import config
from shadow_fruit.logger import LoggerConfig, init_logging
from shadow_fruit.panels_ui import render_all
from shadow_fruit.ui_styles import apply_global_styles
from shadow_fruit.utils_state import get_controller, show_flash

# Configuração da Página
st.set_page_config(
    page_title="Shadow Fruit System",
    page_icon="🌑",
    layout="wide"
)

init_logging(LoggerConfig.from_level_name(config.log_level()))
apply_global_styles()

st.title("🌑 Shadow Fruit System")
st.caption("Score shadows, spend SPU on buffs, reanimate corpses and keep a printable summary.")

ctrl = get_controller()
show_flash()
render_all(ctrl)
