import streamlit as st
import logging
from config import load_environment
from config import loader as config_loader
from core import logger as logger_config
from core.exceptions import ConfigurationError

from ui_components.workspace_view import render_workspace_view

# --- 初始化 ---
load_environment()
logger_config.setup_logging()
app_logger = logging.getLogger(__name__)

st.set_page_config(page_title="FreelanceFlow", page_icon="⚡", layout="centered")

def main():
    try:
        full_config = config_loader.load_config()
        render_workspace_view(full_config)
    except ConfigurationError as e:
        st.error(str(e))
    except Exception as e:
        st.error(f"Unexpected error: {e}")
        app_logger.error(f"页面渲染失败: {e}", exc_info=True)

    st.markdown("---")
    st.caption("FreelanceFlow · AI assistant for freelancers")

if __name__ == "__main__":
    main()
