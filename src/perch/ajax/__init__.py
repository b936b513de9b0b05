"""Ajax behaviors, event delegation, and the ajax request target."""
