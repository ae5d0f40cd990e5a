"""Turn presented filesystem paths into history descriptors."""
