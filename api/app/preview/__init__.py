"""Link preview form controller, state and rendering."""
