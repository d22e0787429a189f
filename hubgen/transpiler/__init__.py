"""TypeScript declaration generation for hub interfaces."""
