"""Document model, structural operators and the editor session."""
