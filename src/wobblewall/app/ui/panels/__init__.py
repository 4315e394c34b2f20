"""Control panels shown over the canvas when wallpaper mode is off."""
