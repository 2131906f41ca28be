from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from domain.schemas import SkillCategory


@dataclass(frozen=True)
class CatalogSkill:
    name: str
    relevance: int  # 1-10, weight of the skill for Web3 roles
    aliases: Tuple[str, ...] = field(default_factory=tuple)
    description: str = ""


def _s(name: str, relevance: int, aliases: Tuple[str, ...], description: str) -> CatalogSkill:
    return CatalogSkill(name=name, relevance=relevance, aliases=aliases, description=description)


# Iteration order matters: categories are matched in this order.
SKILL_CATALOG: Dict[SkillCategory, List[CatalogSkill]] = {
    SkillCategory.BLOCKCHAIN: [
        _s("Solidity", 10, ("智能合约编程语言", "ETH programming language"), "Primary language for Ethereum smart contracts"),
        _s("Rust", 9, ("Substrate development",), "Systems language for high-performance chains and contracts"),
        _s("Go", 8, ("Golang",), "Implementation language of many blockchain nodes and protocols"),
        _s("EVM", 9, ("Ethereum Virtual Machine", "以太坊虚拟机"), "Runtime environment for Ethereum smart contracts"),
        _s("Consensus Mechanisms", 8, ("共识机制", "PoW", "PoS", "Proof of Stake", "Proof of Work"), "Algorithms a blockchain network uses to agree on state"),
        _s("Smart Contracts", 10, ("Smart Contract", "智能合约"), "Self-executing programs deployed on a blockchain"),
        _s("Cryptography", 8, ("密码学", "Digital Signatures"), "Cryptographic primitives securing blockchains"),
        _s("Gas Optimization", 9, ("gas优化", "Gas Efficiency"), "Reducing the execution cost of smart contracts"),
        _s("Chain Development", 9, ("Blockchain Development", "区块链开发", "Protocol Development"), "Building blockchain protocols and networks"),
        _s("Layer 2", 9, ("L2", "Rollups", "State Channels", "二层扩容"), "Scaling solutions built on top of a base chain"),
    ],
    SkillCategory.WEB3: [
        _s("Web3.js", 8, ("Ethereum JavaScript API",), "JavaScript library for interacting with Ethereum"),
        _s("Ethers.js", 9, ("ethers",), "Complete Ethereum library and wallet implementation"),
        _s("Hardhat", 9, ("Ethereum development environment",), "Ethereum smart contract development toolkit"),
        _s("Truffle", 7, ("Truffle Suite",), "Smart contract development framework"),
        _s("Remix", 6, ("Remix IDE",), "Browser-based Solidity IDE"),
        _s("MetaMask", 7, ("小狐狸钱包", "Ethereum wallet"), "Popular Ethereum browser wallet"),
        _s("IPFS", 8, ("InterPlanetary File System", "星际文件系统"), "Distributed content-addressed file storage"),
        _s("The Graph", 8, ("Graph Protocol", "Subgraph"), "Indexing protocol for blockchain data"),
        _s("Substrate", 8, ("Polkadot SDK",), "Blockchain framework of the Polkadot ecosystem"),
        _s("WalletConnect", 7, ("Wallet Connect",), "Open protocol connecting dApps and wallets"),
    ],
    SkillCategory.DEFI: [
        _s("AMM", 8, ("Automated Market Maker", "自动做市商"), "Automated trading protocols"),
        _s("Yield Farming", 7, ("Liquidity Mining", "流动性挖矿"), "Earning rewards by providing liquidity"),
        _s("Lending Protocols", 8, ("DeFi Lending", "借贷协议"), "Decentralized borrowing and lending platforms"),
        _s("DEX", 9, ("Decentralized Exchange", "去中心化交易所"), "Peer-to-peer crypto asset exchanges"),
        _s("Staking", 7, ("质押",), "Locking assets to secure a network for rewards"),
        _s("Liquidity Pools", 8, ("Liquidity Pool", "流动性池"), "Pools of user-locked assets backing DeFi markets"),
        _s("Oracles", 8, ("Oracle", "Chainlink", "预言机"), "Services feeding off-chain data to blockchains"),
        _s("Synthetic Assets", 7, ("合成资产",), "Tokens tracking the value of other assets"),
        _s("Flash Loans", 6, ("Flash Loan", "闪电贷"), "Uncollateralized loans repaid within one transaction"),
        _s("Impermanent Loss", 7, ("无常损失",), "Loss liquidity providers face when prices diverge"),
    ],
    SkillCategory.NFT: [
        _s("ERC-721", 9, ("ERC721",), "Ethereum non-fungible token standard"),
        _s("ERC-1155", 8, ("ERC1155", "Multi Token Standard"), "Standard for mixed fungible and non-fungible tokens"),
        _s("NFT Marketplaces", 7, ("NFT Marketplace", "OpenSea"), "Platforms for trading and auctioning NFTs"),
        _s("NFT Metadata", 7, ("Token Metadata", "NFT元数据"), "Descriptive data attached to NFTs"),
        _s("Digital Art", 6, ("Generative Art", "数字艺术"), "On-chain digital artwork"),
        _s("Gaming NFTs", 7, ("GameFi", "游戏NFT"), "NFT assets used in games"),
        _s("NFT Royalties", 6, ("Creator Royalties", "EIP-2981"), "Creator revenue from secondary sales"),
    ],
    SkillCategory.DAO: [
        _s("Governance", 8, ("On-chain Governance", "链上治理"), "Decision mechanisms of decentralized organizations"),
        _s("Voting Systems", 7, ("On-chain Voting", "Snapshot"), "Voting protocols used by DAOs"),
        _s("Treasury Management", 7, ("DAO Treasury",), "Managing DAO assets"),
        _s("Tokenomics", 8, ("Token Economics", "代币经济学"), "Design of token supply, distribution and incentives"),
        _s("Quadratic Voting", 6, ("二次方投票",), "Voting weighted by strength of preference"),
        _s("Multisig", 8, ("Multi-signature", "Gnosis Safe", "多签钱包"), "Wallets requiring several key holders to sign"),
    ],
    SkillCategory.PROGRAMMING: [
        _s("JavaScript", 7, ("JS",), "Main language of web development"),
        _s("TypeScript", 8, ("TS",), "Typed superset of JavaScript"),
        _s("React", 7, ("React.js", "ReactJS"), "Popular front-end UI library"),
        _s("Node.js", 7, ("Node", "NodeJS"), "Server-side JavaScript runtime"),
        _s("Python", 6, ("py",), "General-purpose language, common for chain analytics"),
        _s("RESTful API", 6, ("REST", "REST API"), "Web service design style"),
        _s("GraphQL", 7, ("GQL",), "API query language and runtime"),
    ],
}
