#!/usr/bin/env python
"""
Streamlit Web UI for PDF Combine.

Run with:
    streamlit run src/pdf_combine/app.py

Features:
- Upload PDFs and JPEG/PNG images
- Reorder and remove items
- Live progress while combining
- Download the combined PDF
"""

import sys
from pathlib import Path

# Add src directory to path for imports when running as script
_src_dir = Path(__file__).parent.parent
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

import logging

import streamlit as st

from pdf_combine import __version__
from pdf_combine.config import PAGE_SIZES, get_config
from pdf_combine.utils.assembler import DocumentAssembler, RunStatus
from pdf_combine.utils.errors import AssemblyError, NoSupportedFilesError
from pdf_combine.utils.io import format_bytes
from pdf_combine.utils.items import InputFile, WorkingSet

logger = logging.getLogger("pdf_combine")
logging.getLogger("fitz").setLevel(logging.WARNING)
logging.getLogger("PIL").setLevel(logging.WARNING)


# Page config must be first Streamlit command
st.set_page_config(
    page_title="PDF Combine",
    page_icon="📄",
    layout="centered",
)


def load_css():
    """Load custom CSS styles."""
    st.markdown("""
    <style>
    .main-header {
        font-size: 2.2rem;
        font-weight: bold;
        text-align: center;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.1rem;
        color: #888;
        text-align: center;
        margin-bottom: 1.5rem;
    }
    </style>
    """, unsafe_allow_html=True)


def init_session_state():
    """Initialize session state variables."""
    if "working_set" not in st.session_state:
        st.session_state.working_set = WorkingSet()
    if "assembler" not in st.session_state:
        st.session_state.assembler = DocumentAssembler(config=get_config())
    if "status" not in st.session_state:
        st.session_state.status = RunStatus()
    if "result" not in st.session_state:
        st.session_state.result = None
    if "uploader_key" not in st.session_state:
        st.session_state.uploader_key = 0


def set_status(message: str, variant: str = "info"):
    st.session_state.status = RunStatus(message, variant)


def clear_status():
    if st.session_state.status.message:
        st.session_state.status = RunStatus()


def render_status():
    """Show the single status line."""
    status = st.session_state.status
    if not status.message:
        return
    show = {
        "success": st.success,
        "warning": st.warning,
        "danger": st.error,
    }.get(status.variant, st.info)
    show(status.message)


def render_sidebar() -> dict:
    """Render sidebar with settings."""
    st.sidebar.header("⚙️ Settings")

    config = st.session_state.assembler.config
    output_name = st.sidebar.text_input(
        "Output filename",
        value=config.output.default_name,
        help="Must end in .pdf, otherwise the default name is used"
    )

    sizes = list(PAGE_SIZES.keys())
    page_size = st.sidebar.selectbox(
        "Page size for images",
        sizes,
        index=sizes.index(config.page.page_size),
        help="Images are centered on a page of this size, turned landscape when wide"
    )
    config.page.page_size = page_size

    return {"output_name": output_name}


def add_uploads(uploaded_files):
    """Classify uploads and append the accepted ones."""
    if not uploaded_files:
        return
    inputs = [
        InputFile(name=f.name, mime_type=f.type or "", data=f.getvalue())
        for f in uploaded_files
    ]
    try:
        st.session_state.working_set.add_files(inputs)
    except NoSupportedFilesError as e:
        set_status(e.summary, "warning")
        return
    st.session_state.result = None
    st.session_state.uploader_key += 1
    clear_status()


def render_item_list():
    """List items with move and remove controls."""
    working_set = st.session_state.working_set
    count = len(working_set)

    for index, item in enumerate(working_set):
        cols = st.columns([6, 1, 1, 1])
        with cols[0]:
            icon = "📕" if item.kind.value == "pdf" else "🖼️"
            st.markdown(f"{icon} **{item.name}**  \n<small>{format_bytes(item.size_bytes)}</small>",
                        unsafe_allow_html=True)
        with cols[1]:
            if st.button("↑", key=f"up-{item.id}", disabled=index == 0):
                working_set.move(index, index - 1)
                st.rerun()
        with cols[2]:
            if st.button("↓", key=f"down-{item.id}", disabled=index == count - 1):
                working_set.move(index, index + 1)
                st.rerun()
        with cols[3]:
            if st.button("✕", key=f"remove-{item.id}"):
                working_set.remove(index)
                st.session_state.result = None
                st.rerun()


def combine(output_name: str):
    """
    Run the assembler with a live progress bar.

    Blocks the script run; Streamlit does not start another run of this
    session until it returns.
    """
    assembler = st.session_state.assembler
    progress_bar = st.progress(0, text="Processing…")

    def on_progress(percent: int):
        progress_bar.progress(percent, text=f"Processing… {percent}%")

    try:
        result = assembler.assemble_sync(
            st.session_state.working_set,
            output_name=output_name,
            on_progress=on_progress
        )
    except AssemblyError as e:
        logger.debug(f"{e.kind}: {e}")
        result = None
    finally:
        progress_bar.empty()

    st.session_state.status = assembler.status
    st.session_state.result = result


def render_download():
    result = st.session_state.result
    if result is None:
        return
    st.download_button(
        f"📥 Download {result.filename} ({result.page_count} pages, {format_bytes(len(result.data))})",
        result.data,
        file_name=result.filename,
        mime="application/pdf",
        use_container_width=True
    )


def main():
    """Main application."""
    load_css()
    init_session_state()

    st.markdown('<h1 class="main-header">📄 PDF Combine</h1>', unsafe_allow_html=True)
    st.markdown(
        '<p class="sub-header">Merge PDFs and images into one PDF, in the order you choose</p>',
        unsafe_allow_html=True
    )

    settings = render_sidebar()

    uploaded = st.file_uploader(
        "Add PDFs or JPEG/PNG images",
        type=["pdf", "jpg", "jpeg", "png"],
        accept_multiple_files=True,
        key=f"uploader-{st.session_state.uploader_key}"
    )
    if uploaded and st.button("➕ Add to list"):
        add_uploads(uploaded)
        st.rerun()

    render_status()

    working_set = st.session_state.working_set
    if len(working_set):
        st.markdown("---")
        st.subheader(f"Items ({len(working_set)})")
        render_item_list()

        col1, col2 = st.columns([2, 1])
        with col1:
            if st.button("🚀 Combine", type="primary", use_container_width=True):
                combine(settings["output_name"])
                st.rerun()
        with col2:
            if st.button("🗑️ Clear", use_container_width=True):
                working_set.clear()
                st.session_state.result = None
                clear_status()
                st.rerun()

        render_download()

    st.markdown("---")
    st.markdown(
        f"""
        <div style="text-align: center; color: #666; font-size: 0.8rem;">
            PDF Combine v{__version__} | Built with Streamlit, PyMuPDF and Pillow
        </div>
        """,
        unsafe_allow_html=True
    )


if __name__ == "__main__":
    main()
