# -*- coding: utf-8 -*-
"""
Helpers de Session State.

O controller (dono do AppState) vive em ``st.session_state`` para sobreviver
aos reruns; na primeira execução da sessão ele é carregado do disco.
"""
from __future__ import annotations

import streamlit as st

from shadow_fruit import config
from shadow_fruit.controller import ShadowFruitController
from shadow_fruit.persistence import JsonDocumentStore

CONTROLLER_KEY = "shadow_fruit_controller"
FLASH_KEY = "shadow_fruit_flash"


# ==========================
# Básicos
# ==========================
def ss_get(key: str, default=None):
    return st.session_state.get(key, default)

def ss_set(key: str, value):
    st.session_state[key] = value

def clear_keys(*keys: str):
    for k in keys:
        st.session_state.pop(k, None)


# ==========================
# Controller da sessão
# ==========================
def get_controller() -> ShadowFruitController:
    ctrl = ss_get(CONTROLLER_KEY)
    if ctrl is None:
        ctrl = ShadowFruitController.load(JsonDocumentStore(config.data_dir()))
        ss_set(CONTROLLER_KEY, ctrl)
    return ctrl


# ==========================
# Mensagem "flash" (sobrevive a um st.rerun)
# ==========================
def flash(message: str, kind: str = "success"):
    ss_set(FLASH_KEY, (kind, message))

def show_flash():
    item = st.session_state.pop(FLASH_KEY, None)
    if not item:
        return
    kind, message = item
    getattr(st, kind, st.info)(message)
