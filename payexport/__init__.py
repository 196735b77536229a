"""Payment data export tool."""
