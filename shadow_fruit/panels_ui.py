# panels_ui.py
"""
UI Streamlit da calculadora: os seis painéis numerados + ações globais.

Cada botão chama exatamente uma operação do ShadowFruitController e depois
``st.rerun()``; nenhum painel muta o estado diretamente.
"""
from __future__ import annotations

from typing import List

import pandas as pd
import streamlit as st

from shadow_data import (
    ABILITY_FIELDS,
    BUFF_TOOLS_VIEWS,
    CORPSE_SHADOW_MODES,
    PROF_TIERS,
    RAW_MIGHT_MAX,
    TARGET_KIND_LABELS,
    TEMPLATE_TIERS,
)
from shadow_engine import AbilityCard, cumulative_cost, describe_stack_effect, next_stack_cost
from shadow_fruit.ability_gen import AbilityGenerationError, generate_ability_text
from shadow_fruit.controller import ShadowFruitController
from shadow_fruit.summary import (
    TargetSummary,
    corpse_actions,
    corpse_score_line,
    corpse_traits,
    project_summaries,
    summary_markdown,
)
from shadow_fruit.ui_styles import pill
from shadow_fruit.utils_state import clear_keys, flash, ss_get, ss_set

PANEL_TITLES = {
    "1": "1 · Shadow Scoring",
    "2": "2 · Stored Shadows & SPU",
    "3": "3 · Shadow Buffs",
    "4": "4 · Reanimated Corpses",
    "5": "5 · Shadow Abilities",
    "6": "6 · Summary",
}

AI_OUTPUT_KEY = "sf_ai_output"


# ─────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────

def _k(prefix: str, *parts: str) -> str:
    """Gera chave única para widgets Streamlit."""
    return f"{prefix}_{'_'.join(parts)}"


def _panel(ctrl: ShadowFruitController, panel_id: str):
    collapsed = ctrl.state.ui.collapsed_panels.get(panel_id, False)
    return st.expander(PANEL_TITLES[panel_id], expanded=not collapsed)


def _target_label(ctrl: ShadowFruitController, target_id: str) -> str:
    t = ctrl.state.targets.get(target_id)
    if t is None:
        return target_id
    return f"{t.name} ({TARGET_KIND_LABELS.get(t.kind, t.kind)})"


# ─────────────────────────────────────────────
# Painel 1: pontuação
# ─────────────────────────────────────────────

def render_scoring_panel(ctrl: ShadowFruitController):
    with _panel(ctrl, "1"):
        c1, c2 = st.columns([3, 2])
        with c1:
            name = st.text_input("Shadow name", key="sf_new_name", placeholder="e.g. Ryuma's shadow")
            raw = st.slider("Raw Might", 0, RAW_MIGHT_MAX, 10, key="sf_new_raw")
            prof = st.selectbox(
                "Proficiency tier", range(len(PROF_TIERS)),
                format_func=lambda i: PROF_TIERS[i], key="sf_new_prof",
            )
            templ = st.selectbox(
                "Template tier", range(len(TEMPLATE_TIERS)),
                format_func=lambda i: TEMPLATE_TIERS[i], key="sf_new_templ",
            )
        with c2:
            score = ctrl.score_preview(raw, prof, templ)
            st.markdown("#### 👁️ Preview")
            m1, m2 = st.columns(2)
            m1.metric("Shadow Level", score.shadow_level)
            m2.metric("SPU", score.power_units)
            st.caption(
                f"Raw {score.raw_factor:.2f} · Proficiency {score.prof_factor:.2f} · "
                f"Template {score.template_factor:.2f} → overall {score.overall:.3f}"
            )
            st.caption("Perfect 1000 SPU is only reached when all three inputs are maxed.")

        if st.button("➕ Add shadow", key="sf_add_shadow"):
            shadow = ctrl.add_shadow(name, raw, prof, templ)
            clear_keys("sf_new_name")
            flash(f"{shadow.name} stored (SL {shadow.shadow_level}, {shadow.power_units} SPU).")
            st.rerun()


# ─────────────────────────────────────────────
# Painel 2: sombras guardadas
# ─────────────────────────────────────────────

def _render_spu_metrics(ctrl: ShadowFruitController):
    totals = ctrl.spu_totals()
    c1, c2, c3 = st.columns(3)
    c1.metric("Total SPU (active)", totals.total)
    c2.metric("Spent SPU", totals.spent)
    c3.metric("Available SPU", totals.available)
    if totals.overspent:
        st.markdown(
            pill(f"Overspent by {-totals.balance} SPU", "sf-spu-warn"),
            unsafe_allow_html=True,
        )


def _render_shadow_editor(ctrl: ShadowFruitController, shadow_id: str):
    sh = ctrl.state.shadow(shadow_id)
    if sh is None:
        return
    prefix = f"sf_sh_{sh.id}"
    with st.expander(f"{sh.name} · SL {sh.shadow_level} · {sh.power_units} SPU"):
        name = st.text_input("Name", sh.name, key=_k(prefix, "name"))
        raw = st.slider("Raw Might", 0, RAW_MIGHT_MAX, sh.raw_might, key=_k(prefix, "raw"))
        c1, c2 = st.columns(2)
        prof = c1.selectbox(
            "Proficiency tier", range(len(PROF_TIERS)), index=sh.proficiency_tier,
            format_func=lambda i: PROF_TIERS[i], key=_k(prefix, "prof"),
        )
        templ = c2.selectbox(
            "Template tier", range(len(TEMPLATE_TIERS)), index=sh.template_tier,
            format_func=lambda i: TEMPLATE_TIERS[i], key=_k(prefix, "templ"),
        )
        techniques = st.text_area(
            "Techniques (one per line)", sh.techniques_text, key=_k(prefix, "tech"), height=100,
        )
        active = st.checkbox("Active (counts toward SPU pool)", sh.active, key=_k(prefix, "active"))

        b1, b2 = st.columns(2)
        if b1.button("💾 Save shadow", key=_k(prefix, "save")):
            ctrl.update_shadow(
                sh.id, name=name, raw_might=raw, proficiency_tier=prof, template_tier=templ,
            )
            ctrl.set_shadow_techniques(sh.id, techniques)
            if active != sh.active:
                ctrl.set_shadow_active(sh.id, active)
            st.rerun()
        if b2.button("🗑️ Remove shadow", key=_k(prefix, "remove")):
            ctrl.remove_shadow(sh.id)
            clear_keys(*[_k(prefix, p) for p in ("name", "raw", "prof", "templ", "tech", "active")])
            st.rerun()


def render_shadows_panel(ctrl: ShadowFruitController):
    with _panel(ctrl, "2"):
        _render_spu_metrics(ctrl)
        shadows = ctrl.state.shadows
        if not shadows:
            st.info("No shadows stored yet. Score one in panel 1.")
            return

        df = pd.DataFrame([
            {
                "Name": sh.name,
                "SL": sh.shadow_level,
                "SPU": sh.power_units,
                "Raw": sh.raw_might,
                "Template": sh.template_label,
                "Active": "Yes" if sh.active else "No",
                "Techniques": len(sh.technique_lines),
            }
            for sh in shadows
        ])
        st.dataframe(df, hide_index=True, use_container_width=True)

        for sh in list(shadows):
            _render_shadow_editor(ctrl, sh.id)


# ─────────────────────────────────────────────
# Painel 3: buffs
# ─────────────────────────────────────────────

def _render_target_picker(ctrl: ShadowFruitController):
    target_ids = list(ctrl.state.targets)
    current = ctrl.state.ui.current_target_id
    c1, c2 = st.columns([3, 2])
    with c1:
        picked = st.selectbox(
            "Buff target", target_ids,
            index=target_ids.index(current) if current in target_ids else 0,
            format_func=lambda tid: _target_label(ctrl, tid),
            key="sf_target_pick",
        )
        if picked != current:
            ctrl.select_target(picked)
            st.rerun()
    with c2:
        ally_name = st.text_input("New ally", key="sf_new_ally", placeholder="Ally name")
        if st.button("➕ Add ally", key="sf_add_ally"):
            new_id = ctrl.add_ally(ally_name)
            if new_id is None:
                st.warning("Give the ally a name first.")
            else:
                ctrl.select_target(new_id)
                clear_keys("sf_new_ally", "sf_target_pick")
                st.rerun()


def _render_catalog(ctrl: ShadowFruitController):
    target = ctrl.state.current_target
    if target is None:
        return
    by_category = {}
    for definition in ctrl.state.catalog.values():
        by_category.setdefault(definition.category, []).append(definition)

    for category, definitions in by_category.items():
        st.markdown(f"#### {category.title()}")
        for d in definitions:
            count = target.stacks.get(d.id)
            c_info, c_minus, c_plus = st.columns([6, 1, 1])
            with c_info:
                st.markdown(f"**{d.name}** ×{count}")
                st.caption(
                    f"{d.description} · Next copy will cost {next_stack_cost(d.base_cost, count)} SPU"
                    + (f" · spent {cumulative_cost(d.base_cost, count)} SPU" if count else "")
                )
                if count:
                    st.caption(describe_stack_effect(d.effect, count))
            if c_minus.button("−", key=_k("sf_buff", target.id, d.id, "minus"), disabled=not count):
                ctrl.adjust_stack(target.id, d.id, -1)
                st.rerun()
            if c_plus.button("+", key=_k("sf_buff", target.id, d.id, "plus")):
                ctrl.adjust_stack(target.id, d.id, 1)
                st.rerun()


def _render_custom_buff_tool(ctrl: ShadowFruitController):
    st.markdown("#### ✨ Custom buff")
    c1, c2 = st.columns([3, 1])
    name = c1.text_input("Name", key="sf_custom_name")
    cost = c2.number_input("Base SPU cost", min_value=1, value=10, step=1, key="sf_custom_cost")
    desc = st.text_input("Description", key="sf_custom_desc")
    if st.button("Add to catalog", key="sf_custom_add"):
        definition = ctrl.add_custom_buff(name, cost, desc)
        if definition is None:
            st.warning("Custom buffs need a name and a positive base cost.")
        else:
            clear_keys("sf_custom_name", "sf_custom_desc")
            flash(f"{definition.name} added to the catalog.")
            st.rerun()


def _render_dc_tool(ctrl: ShadowFruitController):
    st.markdown("#### 🎯 DC helper")
    c1, c2, c3 = st.columns(3)
    sl = c1.number_input("Shadow level", min_value=1, max_value=10, value=1, key="sf_dc_sl")
    prof = c2.number_input("Proficiency mod", value=2, step=1, key="sf_dc_prof")
    mod = c3.number_input("Ability mod", value=0, step=1, key="sf_dc_mod")
    if st.button("Compute DC", key="sf_dc_go"):
        ctrl.compute_dc(sl, prof, mod)
        st.rerun()
    if ctrl.state.ui.last_dc:
        st.success(f"Suggested Shadow DC: {ctrl.state.ui.last_dc}")


def render_buffs_panel(ctrl: ShadowFruitController):
    with _panel(ctrl, "3"):
        _render_spu_metrics(ctrl)
        _render_target_picker(ctrl)

        views = list(BUFF_TOOLS_VIEWS)
        view = st.radio(
            "Tools", views, index=views.index(ctrl.state.ui.buff_tools_view),
            format_func=lambda v: BUFF_TOOLS_VIEWS[v], horizontal=True, key="sf_tools_view",
        )
        if view != ctrl.state.ui.buff_tools_view:
            ctrl.set_buff_tools_view(view)
            st.rerun()
        if view in ("custom", "both"):
            _render_custom_buff_tool(ctrl)
        if view in ("dc", "both"):
            _render_dc_tool(ctrl)

        st.markdown("---")
        _render_catalog(ctrl)

        target = ctrl.state.current_target
        if target is not None:
            notes = st.text_area("Notes for this target", target.notes, key=_k("sf_notes", target.id))
            if notes != target.notes and st.button("💾 Save notes", key=_k("sf_notes", target.id, "save")):
                ctrl.set_target_notes(target.id, notes)
                st.rerun()


# ─────────────────────────────────────────────
# Painel 4: cadáveres
# ─────────────────────────────────────────────

def _render_corpse_card(ctrl: ShadowFruitController, corpse_id: str):
    corpse = ctrl.state.corpse(corpse_id)
    if corpse is None:
        return
    stats = corpse.stats
    powering = ctrl.corpse_shadows(corpse)
    with st.container(border=True):
        st.markdown(f"### {stats.name.upper()}")
        st.caption(f"Reanimated Corpse · SL sum {stats.sl_sum}, {stats.spu_sum} SPU")
        st.markdown(
            " ".join([
                pill(f"AC {stats.armor_class}"),
                pill(f"Hit Points: ~{stats.hit_points} (DM can convert to dice)"),
                pill(f"Speed {stats.speed} ft."),
                pill(corpse_score_line(corpse)),
            ]),
            unsafe_allow_html=True,
        )
        t1, t2, t3, t4 = st.tabs(["Traits", "Actions", "Infused Shadows", "Inherited Techniques"])
        with t1:
            for line in corpse_traits(corpse, powering):
                st.markdown(f"- {line}")
        with t2:
            for line in corpse_actions(corpse):
                st.markdown(f"- {line}")
        with t3:
            if not powering:
                st.caption("No shadows currently powering this corpse.")
            for sh in powering:
                st.markdown(f"- {sh.name} – SL {sh.shadow_level}, {sh.power_units} SPU, Template: {sh.template_label}")
        with t4:
            if not corpse.inherited_techniques:
                st.caption("No techniques recorded on the powering shadows.")
            for tech in corpse.inherited_techniques:
                st.markdown(f"- {tech}")
        if st.button("🩸 Edit buffs for this corpse", key=_k("sf_corpse", corpse.id, "buffs")):
            ctrl.edit_buffs_for_corpse(corpse.name)
            clear_keys("sf_target_pick")
            st.rerun()


def render_corpses_panel(ctrl: ShadowFruitController):
    with _panel(ctrl, "4"):
        c1, c2 = st.columns([3, 1])
        name = c1.text_input("Corpse name", key="sf_corpse_name", placeholder="Same name regenerates it")
        durability = c2.number_input("Durability tier", min_value=0, value=1, step=1, key="sf_corpse_dur")
        modes = list(CORPSE_SHADOW_MODES)
        mode = st.radio(
            "Powering shadows", modes, format_func=lambda m: CORPSE_SHADOW_MODES[m],
            horizontal=True, key="sf_corpse_mode",
        )
        selected: List[str] = []
        if mode == "selected":
            selected = st.multiselect(
                "Shadows", [sh.id for sh in ctrl.state.shadows],
                format_func=lambda sid: ctrl.state.shadow(sid).name if ctrl.state.shadow(sid) else sid,
                key="sf_corpse_selected",
            )
        if st.button("⚰️ Generate corpse", key="sf_corpse_go"):
            corpse = ctrl.generate_corpse(name, durability, mode=mode, selected_ids=selected)
            flash(f"{corpse.name}: AC {corpse.stats.armor_class}, HP ~{corpse.stats.hit_points}.")
            st.rerun()

        if not ctrl.state.corpses:
            st.info("No corpses yet.")
        for corpse in list(ctrl.state.corpses):
            _render_corpse_card(ctrl, corpse.id)


# ─────────────────────────────────────────────
# Painel 5: habilidades
# ─────────────────────────────────────────────

def _render_ai_generator(ctrl: ShadowFruitController):
    st.markdown("#### 🤖 Generate ideas with AI")
    notes = st.text_area("Theme / notes", key="sf_ai_notes", height=80)
    if st.button("Generate", key="sf_ai_go"):
        with st.spinner("Calling the model..."):
            try:
                ss_set(AI_OUTPUT_KEY, generate_ability_text(ctrl.generation_request(notes)))
            except AbilityGenerationError as exc:
                st.error(f"Error generating abilities: {exc}")
    output = ss_get(AI_OUTPUT_KEY)
    if output:
        st.text_area("AI output", output, height=320)


def _render_ability_card(ctrl: ShadowFruitController, card: AbilityCard):
    prefix = f"sf_ab_{card.id}"
    target_ids = list(ctrl.state.targets)
    with st.expander(card.name or "(untitled ability)"):
        values = {"name": st.text_input("Name", card.name, key=_k(prefix, "name"))}
        values["role"] = st.text_input(
            "Role", card.role, key=_k(prefix, "role"), placeholder="Offense / Defense / Support / Control / Utility",
        )
        values["description"] = st.text_area("Description", card.description, key=_k(prefix, "desc"), height=80)
        cols = st.columns(3)
        for i, (label, attr) in enumerate(ABILITY_FIELDS):
            values[attr] = cols[i % 3].text_input(label, getattr(card, attr), key=_k(prefix, attr))
        values["mechanical_effect"] = st.text_area(
            "Mechanical effect", card.mechanical_effect, key=_k(prefix, "mech"), height=70,
        )
        values["combo_notes"] = st.text_area("Combo notes", card.combo_notes, key=_k(prefix, "combo"), height=70)
        bound = st.selectbox(
            "Bound to", target_ids,
            index=target_ids.index(card.target_id) if card.target_id in target_ids else 0,
            format_func=lambda tid: _target_label(ctrl, tid), key=_k(prefix, "target"),
        )

        b1, b2, b3 = st.columns(3)
        if b1.button("💾 Save", key=_k(prefix, "save")):
            ctrl.update_ability(card.id, **values)
            ctrl.set_ability_target(card.id, bound)
            st.rerun()
        if b2.button("🎲 Reroll", key=_k(prefix, "reroll")):
            ctrl.reroll_ability(card.id)
            clear_keys(_k(prefix, "desc"))
            st.rerun()
        if b3.button("🗑️ Delete", key=_k(prefix, "delete")):
            ctrl.delete_ability(card.id)
            st.rerun()
        st.code(card.as_text(), language="text")


def render_abilities_panel(ctrl: ShadowFruitController):
    with _panel(ctrl, "5"):
        _render_ai_generator(ctrl)
        st.markdown("---")
        c1, c2 = st.columns(2)
        if c1.button("📜 Generate stub abilities", key="sf_ab_stubs"):
            ctrl.generate_stub_abilities()
            st.rerun()
        if c2.button("➕ Add empty ability", key="sf_ab_empty"):
            ctrl.add_empty_ability()
            st.rerun()
        if not ctrl.state.abilities:
            st.caption("No ability cards yet.")
        for card in list(ctrl.state.abilities):
            _render_ability_card(ctrl, card)


# ─────────────────────────────────────────────
# Painel 6: resumo
# ─────────────────────────────────────────────

def _render_summary(s: TargetSummary):
    with st.container(border=True):
        st.markdown(f"### {s.name}")
        st.markdown(
            pill(s.kind_label, "sf-kind") + " " + " ".join(pill(p) for p in s.pills()),
            unsafe_allow_html=True,
        )
        st.markdown("**At a Glance**")
        if not s.glance:
            st.caption("No buffs yet.")
        for group, items in s.glance.items():
            st.markdown(f"- **{group}:** {'; '.join(items)}")

        st.markdown("**Powers from Buffs**")
        for line in s.power_lines or ["No special powers from buffs beyond numeric bonuses."]:
            st.markdown(f"- {line}")

        st.markdown("**Abilities & Techniques**")
        for line in s.ability_lines or ["No AI or custom ability cards assigned yet."]:
            st.markdown(f"- {line}")
        if s.inherited_techniques is not None:
            st.markdown("**Inherited Shadow Techniques**")
            for tech in s.inherited_techniques or ["None recorded."]:
                st.markdown(f"- {tech}")

        if s.breakdown:
            df = pd.DataFrame([
                {"Buff": b.name, "Stacks": b.count, "SPU spent": b.spu_spent, "Effect": b.effect_text}
                for b in s.breakdown
            ])
            st.dataframe(df, hide_index=True, use_container_width=True)
        if s.notes:
            st.caption(f"Notes: {s.notes}")


def render_summary_panel(ctrl: ShadowFruitController):
    with _panel(ctrl, "6"):
        summaries = project_summaries(ctrl.state)
        for s in summaries:
            _render_summary(s)
        st.download_button(
            "🖨️ Export summary (Markdown)",
            summary_markdown(summaries),
            file_name="shadow_fruit_summary.md",
            mime="text/markdown",
            key="sf_export",
        )


# ─────────────────────────────────────────────
# Sidebar: ações globais
# ─────────────────────────────────────────────

def render_sidebar(ctrl: ShadowFruitController):
    st.sidebar.title("🌑 Shadow Fruit")
    totals = ctrl.spu_totals()
    st.sidebar.markdown(f"**SPU:** {totals.available} available / {totals.total} total")

    if st.sidebar.button("💾 Save now"):
        if ctrl.save_now():
            st.sidebar.success("Saved.")
        else:
            st.sidebar.error("Could not write the save file (see logs).")

    st.sidebar.markdown("---")
    st.sidebar.markdown("**Collapsed panels**")
    for panel_id, title in PANEL_TITLES.items():
        collapsed = ctrl.state.ui.collapsed_panels.get(panel_id, False)
        value = st.sidebar.checkbox(title, collapsed, key=_k("sf_collapse", panel_id))
        if value != collapsed:
            ctrl.set_panel_collapsed(panel_id, value)
            st.rerun()

    st.sidebar.markdown("---")
    confirm = st.sidebar.checkbox("I understand this erases everything", key="sf_reset_confirm")
    if st.sidebar.button("♻️ Reset all data", disabled=not confirm):
        ctrl.reset()
        clear_keys("sf_reset_confirm", "sf_target_pick", AI_OUTPUT_KEY)
        flash("All data reset to defaults.", "warning")
        st.rerun()


def render_all(ctrl: ShadowFruitController):
    render_sidebar(ctrl)
    render_scoring_panel(ctrl)
    render_shadows_panel(ctrl)
    render_buffs_panel(ctrl)
    render_corpses_panel(ctrl)
    render_abilities_panel(ctrl)
    render_summary_panel(ctrl)
