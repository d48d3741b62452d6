"""
Presentation layer (Streamlit).
"""
