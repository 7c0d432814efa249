"""StoryFoundry API."""
