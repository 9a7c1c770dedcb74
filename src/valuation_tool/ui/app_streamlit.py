"""
Streamlit UI for the Device Valuation Tool.

Features:
- Tabbed interface for Valuation, Pricing Rules, Catalog, and System Info
- Assessment form built from the question catalog
- Per-product rules editing with a data grid
- Trace of every adjustment behind an offer
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from valuation_tool import __version__
from valuation_tool.config.logging import init_logging
from valuation_tool.config.settings import get_settings
from valuation_tool.engine.categories import (
    GROUP_KINDS, KNOWN_CONDITIONS, NO, QUESTIONS_GROUP, YES, GroupKind, YesNoQuestion,
)
from valuation_tool.engine.errors import ProductNotFoundError, RulesValidationError
from valuation_tool.engine.labels import format_answer_value, get_assessment_label
from valuation_tool.engine.models import PricingRules, ValuationRequest
from valuation_tool.engine.valuation_engine import ValuationEngine


st.set_page_config(
    page_title="Device Valuation Tool",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    init_logging()
    return ValuationEngine()


@st.cache_resource
def get_settings_cached():
    """Get cached settings."""
    return get_settings()


def rules_to_frame(rules: PricingRules) -> pd.DataFrame:
    """Flatten a rule set into editable sheet rows."""
    rows = [
        {'group': QUESTIONS_GROUP, 'key': key, 'yes': price.yes, 'no': price.no, 'value': None}
        for key, price in rules.questions.items()
    ]
    for group, table in rules.groups.items():
        for key, value in table.items():
            rows.append({'group': group, 'key': key, 'yes': None, 'no': None, 'value': value})
    return pd.DataFrame(rows, columns=['group', 'key', 'yes', 'no', 'value'])


def frame_to_rules(df: pd.DataFrame) -> dict:
    """Turn edited sheet rows back into a rules document."""
    document: dict = {QUESTIONS_GROUP: {}}
    for _, row in df.iterrows():
        group = '' if pd.isna(row['group']) else str(row['group']).strip()
        key = '' if pd.isna(row['key']) else str(row['key']).strip()
        if not group or not key:
            continue
        if group == QUESTIONS_GROUP:
            document[QUESTIONS_GROUP][key] = {
                YES: 0 if pd.isna(row['yes']) else int(row['yes']),
                NO: 0 if pd.isna(row['no']) else int(row['no']),
            }
        else:
            document.setdefault(group, {})[key] = 0 if pd.isna(row['value']) else int(row['value'])
    return document


try:
    engine = get_engine()
    settings = get_settings_cached()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


# ============================================================================
# SIDEBAR: Product Selection
# ============================================================================
with st.sidebar:
    st.header("📱 Device")

    with st.container(border=True):
        category = st.selectbox("Category", ["ALL"] + engine.catalog.categories())
        category_filter = None if category == "ALL" else category
        brand = st.selectbox("Brand", ["ALL"] + engine.catalog.brands(category_filter))
        brand_filter = None if brand == "ALL" else brand

        products = engine.catalog.search(category=category_filter, brand=brand_filter)
        if not products:
            st.warning("No products match")
            st.stop()

        labels = {f"{p.brand} {p.model}": p for p in products}
        selected_label = st.selectbox("Model", list(labels.keys()))
        product = labels[selected_label]

        st.markdown(f"**Base Price:** ₹{product.base_price:,}")
        if product.display_price:
            st.caption(f"Advertised up to ₹{product.display_price:,}")

    resolved = engine.store.resolve(product.product_id)
    st.divider()
    if resolved.source == "product":
        st.success("🔧 **Product rules active**")
    elif resolved.source == "global":
        st.info("🌐 **Global rules active**")
    else:
        st.warning("⚠️ No pricing rules configured")


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title("Device Valuation Tool")
st.caption(f"v{__version__} | Valuation Engine Active | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3, tab4 = st.tabs(["⚡ Valuation", "🔧 Pricing Rules", "📚 Catalog", "📊 System"])


# ============================================================================
# TAB 1: VALUATION
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.8, 1.2], gap="large")
    answers = {}

    with col1:
        st.subheader("Assessment")

        with st.container(border=True):
            st.markdown("##### ❓ Questions")
            asked = [q for q in YesNoQuestion if resolved.rules.has_rule(QUESTIONS_GROUP, q.value)]
            for q in asked or list(YesNoQuestion)[:6]:
                choice = st.radio(
                    get_assessment_label(q.value),
                    ["—", YES, NO],
                    horizontal=True,
                    key=f"q_{product.product_id}_{q.value}",
                )
                if choice != "—":
                    answers[q.value] = choice

        with st.container(border=True):
            st.markdown("##### 🔍 Condition")
            for group, kind in GROUP_KINDS.items():
                options = list(resolved.rules.groups.get(group.value, {}).keys())
                if not options:
                    continue
                label = get_assessment_label(group.value)
                widget_key = f"g_{product.product_id}_{group.value}"
                if kind is GroupKind.SINGLE_SELECT:
                    choice = st.selectbox(label, ["—"] + options, key=widget_key)
                    if choice != "—":
                        answers[group.value] = choice
                else:
                    picked = st.multiselect(label, options, key=widget_key)
                    if picked:
                        answers[group.value] = picked

    with col2:
        st.subheader("Offer")

        with st.container(border=True):
            try:
                result = engine.quote(ValuationRequest(product_id=product.product_id, answers=answers))
            except ProductNotFoundError as e:
                st.error(str(e))
                st.stop()

            m1, m2 = st.columns(2)
            m1.metric("Offer", f"₹{result.final_price:,}")
            m2.metric("Adjustments", f"₹{result.breakdown.total_adjustment:,}")

            st.divider()
            st.caption(f"**Rules:** {result.rules_source}")

            if result.warnings:
                for warning in result.warnings:
                    st.warning(warning)

            st.download_button(
                "📥 CSV",
                data=pd.DataFrame([{
                    'Category': get_assessment_label(a.category),
                    'Answer': format_answer_value(a.answer),
                    'Delta': a.delta,
                } for a in result.breakdown.adjustments]).to_csv(index=False),
                file_name=f"valuation_{product.product_id}.csv",
                mime="text/csv",
                use_container_width=True
            )

    # Trace (Full Width)
    with st.expander("📊 View Pricing Trace"):
        st.dataframe(
            pd.DataFrame([
                {'Step': t.step, 'Description': t.description, 'Value': t.value or ''}
                for t in result.trace
            ]),
            use_container_width=True,
            hide_index=True,
        )


# ============================================================================
# TAB 2: PRICING RULES
# ============================================================================
with tab2:
    st.subheader("🔧 Pricing Rules")

    scope = st.radio(
        "Scope",
        [f"Product ({product.product_id})", "Global"],
        horizontal=True,
        label_visibility="collapsed",
    )
    is_global = scope == "Global"

    if is_global:
        current = engine.store.get_global_rules()
        metadata = engine.store.get_metadata()
    else:
        current = resolved.rules
        metadata = engine.store.get_metadata(product.product_id) if resolved.source == "product" else None
        if resolved.source != "product":
            st.caption(f"No override yet; editing starts from the {resolved.source} rules.")

    if metadata:
        st.caption(f"Last updated {metadata.get('updated_at') or '—'} by {metadata.get('updated_by') or '—'}")

    edited_df = st.data_editor(
        rules_to_frame(current or PricingRules()),
        use_container_width=True,
        num_rows="dynamic",
        column_config={
            "group": st.column_config.TextColumn("Group", required=True),
            "key": st.column_config.TextColumn("Key", required=True),
            "yes": st.column_config.NumberColumn("Yes", step=1),
            "no": st.column_config.NumberColumn("No", step=1),
            "value": st.column_config.NumberColumn("Value", step=1),
        },
        hide_index=True,
        key=f"rules_editor_{'global' if is_global else product.product_id}",
    )

    updated_by = st.text_input("Updated by", value="admin")

    btn_col1, btn_col2 = st.columns(2)
    with btn_col1:
        if st.button("💾 Save Rules", type="primary", use_container_width=True):
            document = frame_to_rules(edited_df)
            try:
                if is_global:
                    engine.store.save_global_rules(document, updated_by=updated_by)
                else:
                    engine.store.save_product_rules(product.product_id, document, updated_by=updated_by)
                st.toast("Pricing rules saved")
                st.rerun()
            except RulesValidationError as e:
                for err in e.errors:
                    st.error(err)
    with btn_col2:
        if not is_global and resolved.source == "product":
            if st.button("🗑️ Remove Override", use_container_width=True):
                engine.store.delete_product_rules(product.product_id)
                st.rerun()

    with st.expander("📖 Known conditions"):
        st.dataframe(
            pd.DataFrame([
                {'Group': group.value, 'Kind': kind.value, 'Conditions': ", ".join(KNOWN_CONDITIONS.get(group, ()))}
                for group, kind in GROUP_KINDS.items()
            ]),
            use_container_width=True,
            hide_index=True,
        )


# ============================================================================
# TAB 3: CATALOG EXPLORER
# ============================================================================
with tab3:
    st.subheader("📚 Product Catalog")

    search_term = st.text_input("Search Catalog", placeholder="Enter brand or model...", label_visibility="collapsed")

    matches = engine.catalog.search(text=search_term or None)
    overrides = set(engine.store.list_product_overrides())
    display_catalog = pd.DataFrame([{
        'Product ID': p.product_id,
        'Category': p.category,
        'Brand': p.brand,
        'Model': p.model,
        'Base Price': p.base_price,
        'Display Price': p.display_price,
        'Power-on %': p.power_on_percentage,
        'Own Rules': p.product_id in overrides,
    } for p in matches])

    st.dataframe(display_catalog, use_container_width=True, height=600, hide_index=True)
    st.caption(f"Total products: {len(engine.catalog):,} | Visible: {len(display_catalog):,}")


# ============================================================================
# TAB 4: SYSTEM INFO
# ============================================================================
with tab4:
    st.header("System Status")

    c1, c2, c3 = st.columns(3)
    c1.metric("Products", f"{len(engine.catalog):,}")
    c2.metric("Product Overrides", f"{len(engine.store.list_product_overrides()):,}")
    c3.metric("Global Rules", "Configured" if engine.store.get_global_rules() is not None else "Missing")

    st.caption(f"Data directory: {settings.data_dir}")
    st.caption(f"Rules cache TTL: {settings.rules_cache_ttl:.0f}s")

    if engine.catalog.warnings:
        st.subheader("Catalog Warnings")
        for warning in engine.catalog.warnings:
            st.warning(warning)

    if st.button("🔨 Recompile Rules Sheet", type="secondary"):
        with st.spinner("Compiling..."):
            import subprocess
            build = subprocess.run(
                [sys.executable, 'scripts/build_all.py', '--skip-tests'],
                cwd=settings.project_root,
                capture_output=True,
                text=True,
            )
        if build.returncode != 0:
            st.error("Rules sheet compilation failed")
            st.code(build.stdout + build.stderr)
        else:
            engine.reload_data()
            st.toast("Rules sheet compiled")
            st.rerun()
