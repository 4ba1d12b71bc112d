from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nixshares.api.routers import mounts, shares, system

app = FastAPI(
    title="NixShares API",
    description="Manage Samba and CIFS shares declared in a NixOS configuration.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(shares.router)
app.include_router(mounts.router)
app.include_router(system.router)
