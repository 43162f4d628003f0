"""Streamlit page and Plotly charts for the travel problem simulator."""
