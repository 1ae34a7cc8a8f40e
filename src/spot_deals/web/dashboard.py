import os

import streamlit as st
from pydantic import ValidationError

from spot_deals.core.app import App
from spot_deals.core.errors import NoResultsFound, SpotDealsError
from spot_deals.core.settings import Settings
from spot_deals.core.utils import setup_logger
from spot_deals.web.deals_view import DealsView

logger = setup_logger(name="web.dashboard")


class DealsDashboard:
    """Streamlit page for browsing spot deals"""

    def __init__(self):
        st.set_page_config(
            page_title="Spot Deals",
            page_icon="💸",
            layout="wide"
        )
        self.settings: Settings = self._init_settings()
        self._init_session_state()

    def _init_settings(self) -> Settings:
        """Initialize application settings"""
        try:
            return Settings()
        except ValidationError as e:
            logger.error("Configuration Error: Missing or invalid environment variables")
            for error in e.errors():
                field = error["loc"][0]
                message = error["msg"]
                logger.error(f"{field}: {message}")
            os._exit(1)

    def _init_session_state(self):
        """Initialize session state variables"""
        if 'app_instance' not in st.session_state:
            st.session_state.app_instance = App(self.settings)

        if 'deals_view' not in st.session_state:
            st.session_state.deals_view = DealsView(st.session_state.app_instance)

    def run(self):
        """Run the dashboard"""
        with st.sidebar:
            st.subheader("Settings")
            top_n = st.number_input(
                "Number of global deals",
                min_value=1,
                max_value=50,
                value=self.settings.TOP_N,
                step=1,
            )

        st.title("💸 Spot Deals")
        self._render_global_deals(int(top_n))
        st.divider()
        self._render_region_deals()

    def _render_global_deals(self, top_n: int):
        """Render the best deals across all regions"""
        st.subheader("Best global deals")
        if not st.button("Search all regions", type="primary", key="search_global"):
            return
        try:
            with st.spinner('Querying every region...'):
                rows = st.session_state.deals_view.global_rows(top_n)
            st.dataframe(rows, width="stretch", hide_index=True)
        except NoResultsFound:
            st.info("No deals found.")
        except SpotDealsError as e:
            st.error(f"Error fetching global deals: {e}")

    def _render_region_deals(self):
        """Render the ranked deals of one selected region"""
        st.subheader("Deals by region")
        try:
            regions = st.session_state.deals_view.get_available_regions()
        except SpotDealsError as e:
            st.error(f"Error fetching regions: {e}")
            return

        selected_region = st.selectbox(
            "Select region",
            regions,
            index=None,
            placeholder="Choose a region...",
            label_visibility="collapsed"
        )
        if not selected_region:
            return
        try:
            with st.spinner(f'Fetching deals for {selected_region}...'):
                rows = st.session_state.deals_view.region_rows(selected_region)
        except SpotDealsError as e:
            st.error(f"Error fetching deals for {selected_region}: {e}")
            return
        if not rows:
            st.info(f"No offers above {self.settings.MIN_SAVINGS_RATE}% savings in {selected_region}.")
            return
        st.dataframe(rows, width="stretch", hide_index=True)


if __name__ == "__main__":
    dashboard = DealsDashboard()
    dashboard.run()
