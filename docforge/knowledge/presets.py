"""Built-in frontend knowledge-base presets.

Each preset is a complete :class:`ResolvedConfiguration` for one framework.
The table is built once at import time and never modified afterwards;
:func:`lookup_preset` hands out deep copies, so nothing a caller does to a
resolved configuration reaches the table.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional

from .models import ResolvedConfiguration


# ---------------------------------------------------------------------------
# Template sources
# ---------------------------------------------------------------------------

_REACT_COMPONENT = """\
import React from 'react';
import styles from './styles.module.css';

interface Props {
  // 组件属性
}

export const Component: React.FC<Props> = ({ /* props */ }) => {
  return (
    <div className={styles.container}>
      {/* 组件内容 */}
    </div>
  );
};"""

_REACT_HOOK = """\
import { useState, useEffect } from 'react';

export const useHook = () => {
  const [state, setState] = useState();

  useEffect(() => {
    // 副作用逻辑
  }, []);

  return {
    state,
    // 其他返回值
  };
};"""

_VUE_COMPONENT = """\
<template>
  <div class="component">
    <!-- 组件模板 -->
  </div>
</template>

<script setup lang="ts">
// 组件逻辑
</script>

<style lang="scss" scoped>
.component {
  // 组件样式
}
</style>"""

_VUE_COMPOSABLE = """\
import { ref, onMounted } from 'vue';

export const useComposable = () => {
  const state = ref();

  onMounted(() => {
    // 初始化逻辑
  });

  return {
    state,
    // 其他返回值
  };
};"""

_NEXT_PAGE = """\
import { Metadata } from 'next';

export const metadata: Metadata = {
  title: 'Page Title',
  description: 'Page description',
};

export default function Page() {
  return (
    <main>
      {/* 页面内容 */}
    </main>
  );
}"""

_NEXT_API = """\
import { NextApiRequest, NextApiResponse } from 'next';

export default async function handler(
  req: NextApiRequest,
  res: NextApiResponse
) {
  // API 处理逻辑
  res.status(200).json({ message: 'Success' });
}"""


# ---------------------------------------------------------------------------
# Preset documents
# ---------------------------------------------------------------------------

_PRESET_DOCUMENTS: dict[str, dict[str, Any]] = {
    "react": {
        "standards": {
            "naming": {
                "components": "PascalCase",
                "hooks": "useCamelCase",
                "constants": "UPPER_CASE",
                "files": "kebab-case",
            },
            "structure": {
                "components": "src/components",
                "hooks": "src/hooks",
                "services": "src/services",
                "utils": "src/utils",
                "types": "src/types",
                "styles": "src/styles",
                "assets": "src/assets",
            },
            "conventions": [
                "使用 TypeScript",
                "使用函数组件和 Hooks",
                "使用 ESLint 和 Prettier",
                "使用 CSS Modules 或 styled-components",
                "使用 React Query 进行数据获取",
                "使用 React Router 进行路由管理",
            ],
        },
        "templates": {
            "component": {"path": "templates/react/component.tsx", "content": _REACT_COMPONENT},
            "hook": {"path": "templates/react/hook.ts", "content": _REACT_HOOK},
        },
    },
    "vue": {
        "standards": {
            "naming": {
                "components": "PascalCase",
                "composables": "useCamelCase",
                "constants": "UPPER_CASE",
                "files": "kebab-case",
            },
            "structure": {
                "components": "src/components",
                "composables": "src/composables",
                "services": "src/services",
                "utils": "src/utils",
                "types": "src/types",
                "styles": "src/styles",
                "assets": "src/assets",
            },
            "conventions": [
                "使用 TypeScript",
                "使用 Composition API",
                "使用 ESLint 和 Prettier",
                "使用 SCSS 或 Less",
                "使用 Pinia 进行状态管理",
                "使用 Vue Router 进行路由管理",
            ],
        },
        "templates": {
            "component": {"path": "templates/vue/component.vue", "content": _VUE_COMPONENT},
            "composable": {"path": "templates/vue/composable.ts", "content": _VUE_COMPOSABLE},
        },
    },
    "next": {
        "standards": {
            "naming": {
                "components": "PascalCase",
                "hooks": "useCamelCase",
                "constants": "UPPER_CASE",
                "files": "kebab-case",
            },
            "structure": {
                "components": "src/components",
                "hooks": "src/hooks",
                "services": "src/services",
                "utils": "src/utils",
                "types": "src/types",
                "styles": "src/styles",
                "assets": "public",
                "pages": "src/pages",
                "api": "src/pages/api",
            },
            "conventions": [
                "使用 TypeScript",
                "使用 App Router",
                "使用 ESLint 和 Prettier",
                "使用 Tailwind CSS",
                "使用 SWR 或 React Query",
                "使用 NextAuth.js 进行认证",
            ],
        },
        "templates": {
            "page": {"path": "templates/next/page.tsx", "content": _NEXT_PAGE},
            "api": {"path": "templates/next/api.ts", "content": _NEXT_API},
        },
    },
}

PRESETS: Mapping[str, ResolvedConfiguration] = MappingProxyType(
    {
        name: ResolvedConfiguration.model_validate(document)
        for name, document in _PRESET_DOCUMENTS.items()
    }
)


def lookup_preset(framework: str) -> Optional[ResolvedConfiguration]:
    """Return the preset for *framework* (case-insensitive), or ``None``.

    ``None`` is an ordinary outcome: callers fall back to another source.
    """
    preset = PRESETS.get(framework.strip().lower())
    return preset.model_copy(deep=True) if preset is not None else None


def available_presets() -> list[str]:
    """Return the sorted framework identifiers that have a preset."""
    return sorted(PRESETS)
